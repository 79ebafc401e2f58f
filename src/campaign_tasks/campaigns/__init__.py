"""
Campaign persistence used by the campaign start cascade.
"""
