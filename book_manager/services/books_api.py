from urllib.parse import quote

from book_manager.book import BookRecord
from book_manager.config import Settings
from book_manager.services.http_client import ApiResult, BooksHTTPClient


class BooksAPI:
    """Endpoint map for the books REST service.

    URLs are built as:
        list    GET     {base}{list_path}
        create  POST    {base}
        update  PUT     {base}/{isbn}
        delete  DELETE  {base}/{isbn}
    """

    def __init__(self, http: BooksHTTPClient, settings: Settings):
        self.http = http
        self.base_url = settings.api_base_url
        self.list_path = settings.api_list_path

    @property
    def list_url(self) -> str:
        return f"{self.base_url}{self.list_path}"

    @property
    def collection_url(self) -> str:
        return self.base_url

    def item_url(self, isbn: str) -> str:
        return f"{self.base_url.rstrip('/')}/{quote(isbn, safe='')}"

    async def list_books(self) -> ApiResult:
        return await self.http.get(self.list_url)

    async def create_book(self, record: BookRecord) -> ApiResult:
        return await self.http.post(self.collection_url, json=record.to_dict())

    async def update_book(self, isbn: str, record: BookRecord) -> ApiResult:
        """PUT ``record`` to the item addressed by ``isbn`` (the stored key)."""
        return await self.http.put(self.item_url(isbn), json=record.to_dict())

    async def delete_book(self, isbn: str) -> ApiResult:
        return await self.http.delete(self.item_url(isbn))
