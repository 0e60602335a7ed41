from .identifiers import coerce_uuid, coerce_uuids

__all__ = ["coerce_uuid", "coerce_uuids"]
