"""
Version 1 of the API.

The routes keep the names the admin web client already invokes
(``create-vendor-user``, ``delete-vendor-with-auth`` and so on), so
the client only needs its base URL pointed at this service.
"""
