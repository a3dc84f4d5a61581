"""Snapshot export Common Layer.

Shared configuration, event contracts and request builders for the snapshot
exporter Lambda. Kept free of CDK imports so the layer ships with boto3,
pydantic and the standard library only.
"""
