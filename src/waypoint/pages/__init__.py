"""Pages — lifecycle of routed page instances.

The router keeps its bookkeeping (route, hash, expiry) in an
identity-keyed side table instead of on the page objects themselves.
"""
