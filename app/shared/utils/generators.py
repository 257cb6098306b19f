"""ID generators for documents created by the dashboard."""

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()


def generate_cuid() -> str:
    """Return a new CUID2 string, used as the Firestore document ID for created programs.

    CUID2 ids contain no '/' so they are always valid document IDs.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result
