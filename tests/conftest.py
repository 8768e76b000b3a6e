import os

# Keep opik @track decorators from trying to reach a tracing backend during tests
os.environ.setdefault("OPIK_TRACK_DISABLE", "true")
