from quill.store.api_client import ArticleStoreClient

__all__ = ["ArticleStoreClient"]
