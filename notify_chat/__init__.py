"""Chat push notification delivery service.

Run the API with ``uvicorn main:app`` from the project root, or drain the
queue once with ``python -m scripts.drain_queue``.
"""
