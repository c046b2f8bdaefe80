"""
Uploads Module
==============

Bounded Context for image upload URL issuance.

Responsibilities:
- Validate the requested image content type
- Allocate a date-partitioned object key
- Issue a short-lived presigned PUT URL bound to that content type
"""
