"""
Storefront cart engine.

- cart: cart store, storage media, and view synchronizer
- routers: HTTP front end for the cart pages
- services: money helpers
- utils: input sanitization for page events
"""
