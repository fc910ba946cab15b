"""Session persistence: whole-aggregate JSON document, schema-validated."""

from storage.state_store import SessionSnapshot, StateStore, StateStoreError, from_document, to_document

__all__ = ["SessionSnapshot", "StateStore", "StateStoreError", "from_document", "to_document"]
