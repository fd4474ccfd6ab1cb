__all__ = ("StoreError", "StorageWriteError", "StoreConnectionError")


class StoreError(Exception): ...


class StorageWriteError(StoreError): ...


class StoreConnectionError(StoreError): ...
