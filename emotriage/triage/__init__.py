"""
Triage Module
=============

Bounded Context for emotion-aware support ticket triage.

Responsibilities:
- Fetch an uploaded image from object storage
- Obtain an emotion classification from the inference service
- Derive a priority, rationale and next step with the deterministic
  triage engine
"""
