"""gateway/ -- The login gateway: validation, backend exchange, session cookie, redirects.

Layer rule: gateway/ imports only stdlib, third-party libraries, and core/
(the kernel). It does NOT import from api/ or web/, and never touches a
Request object. api/ and web/ import from gateway/, not the other way around.
"""
