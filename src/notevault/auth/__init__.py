"""Authentication and authorization.

Learn: Sessions here are opaque, server-side records, not JWTs.
1. Users → email/password → random session token in an HttpOnly cookie
2. Every protected request → token looked up in the sessions table

Both resolve to an explicit RequestContext that handlers receive as a
parameter; nothing about the caller is stashed in ambient state.
"""
