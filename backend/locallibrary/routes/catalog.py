"""
LocalLibrary — Catalog Route Handlers
======================================

What:  URL + verb → service handler for the whole catalog.
How:   Handlers stay thin: read the path id / form body, call the service,
       hand the outcome to the render boundary.

Route Inventory (per entity: book, author, genre, bookinstance):
    GET       /catalog/                         dashboard counts
    GET       /catalog/<plural>                 list
    GET/POST  /catalog/<entity>/create          create form / submit
    GET/POST  /catalog/<entity>/{id}/delete     confirm / delete
    GET/POST  /catalog/<entity>/{id}/update     edit form / submit
    GET       /catalog/<entity>/{id}            detail

Ids are taken as plain strings; a malformed id surfaces as StorageError
from the repository, an unknown one as NotFoundError or a redirect.
"""

import logging
from typing import Callable, Dict, Type

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from locallibrary.database import Database, get_database
from locallibrary.services.author_service import AuthorService
from locallibrary.services.book_service import BookService
from locallibrary.services.bookinstance_service import BookInstanceService
from locallibrary.services.catalog_service import CatalogService
from locallibrary.services.crud import CrudService
from locallibrary.services.genre_service import GenreService
from locallibrary.templating import respond
from locallibrary.validation import FormValue

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/catalog", tags=["Catalog"], default_response_class=HTMLResponse)

home_router = APIRouter(tags=["Catalog"])


async def form_data(request: Request) -> Dict[str, FormValue]:
    """
    Submitted form as field → value; repeated keys (checkbox groups) become
    lists, single keys stay scalar.
    """
    form = await request.form()
    data: Dict[str, FormValue] = {}
    for key in form.keys():
        values = [str(value) for value in form.getlist(key)]
        data[key] = values[0] if len(values) == 1 else values
    return data


def service_provider(service_class: Type[CrudService]) -> Callable[..., CrudService]:
    """FastAPI dependency building `service_class` around the shared database."""

    def provide(db: Database = Depends(get_database)) -> CrudService:
        return service_class(db)

    return provide


@home_router.get("/", include_in_schema=False)
async def home() -> RedirectResponse:
    return RedirectResponse("/catalog", status_code=302)


@router.get("", include_in_schema=False)
@router.get("/", name="catalog_index", summary="Dashboard counts")
async def index(request: Request, db: Database = Depends(get_database)) -> Response:
    return respond(request, await CatalogService(db).index())


def register_crud_routes(singular: str, plural: str, service_class: Type[CrudService]) -> None:
    """
    Mount the eight CRUD handlers for one entity.

    The fixed `/create` path is registered before `/{entity_id}` so it is
    not captured as an id.
    """
    provider = service_provider(service_class)

    @router.get(f"/{plural}", name=f"{singular}_list")
    async def list_view(request: Request, service: CrudService = Depends(provider)) -> Response:
        return respond(request, await service.list())

    @router.get(f"/{singular}/create", name=f"{singular}_create_get")
    async def create_get(request: Request, service: CrudService = Depends(provider)) -> Response:
        return respond(request, await service.create_get())

    @router.post(f"/{singular}/create", name=f"{singular}_create_post")
    async def create_post(request: Request, service: CrudService = Depends(provider)) -> Response:
        return respond(request, await service.create_post(await form_data(request)))

    @router.get(f"/{singular}/{{entity_id}}/delete", name=f"{singular}_delete_get")
    async def delete_get(
        entity_id: str, request: Request, service: CrudService = Depends(provider)
    ) -> Response:
        return respond(request, await service.delete_get(entity_id))

    @router.post(f"/{singular}/{{entity_id}}/delete", name=f"{singular}_delete_post")
    async def delete_post(
        entity_id: str, request: Request, service: CrudService = Depends(provider)
    ) -> Response:
        return respond(request, await service.delete_post(entity_id))

    @router.get(f"/{singular}/{{entity_id}}/update", name=f"{singular}_update_get")
    async def update_get(
        entity_id: str, request: Request, service: CrudService = Depends(provider)
    ) -> Response:
        return respond(request, await service.update_get(entity_id))

    @router.post(f"/{singular}/{{entity_id}}/update", name=f"{singular}_update_post")
    async def update_post(
        entity_id: str, request: Request, service: CrudService = Depends(provider)
    ) -> Response:
        return respond(request, await service.update_post(entity_id, await form_data(request)))

    @router.get(f"/{singular}/{{entity_id}}", name=f"{singular}_detail")
    async def detail(
        entity_id: str, request: Request, service: CrudService = Depends(provider)
    ) -> Response:
        return respond(request, await service.detail(entity_id))


register_crud_routes("book", "books", BookService)
register_crud_routes("author", "authors", AuthorService)
register_crud_routes("genre", "genres", GenreService)
register_crud_routes("bookinstance", "bookinstances", BookInstanceService)
