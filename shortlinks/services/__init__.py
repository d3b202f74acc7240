"""
Services module for the short link business logic.

- allocator: random short ids, uniqueness enforced by insert
- url_service: shorten, list and delete for a given owner
- redirect_service: resolve a short id and record the visit
- client_classifier: User-Agent to browser/os/device labels
"""
