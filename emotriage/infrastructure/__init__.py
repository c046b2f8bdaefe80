"""
Infrastructure Clients
======================

Concrete clients for the external services the application talks to:
- storage: S3 object storage (reads and presigned uploads)
- inference: Hugging Face image classification endpoint
"""
