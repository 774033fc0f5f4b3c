# controllers/bookinstance.py
import logging
from functools import partial
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from locallibrary.crud import book as book_crud
from locallibrary.crud import bookinstance as instance_crud
from locallibrary.database import get_db, get_sessionmaker, gather_reads
from locallibrary.models import BOOK_INSTANCE_STATUSES, BookInstance
from locallibrary.schemas import BookInstanceCreate
from locallibrary.services.catalog_forms import BookInstanceForm
from locallibrary.services.forms import Violation, form_to_dict, reference_id, validate_form
from locallibrary.views import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookinstances"])

INSTANCE_LIST_URL = "/catalog/bookinstances"


def instance_form_values(instance: BookInstance) -> dict:
    return {
        "book": str(instance.book_id),
        "imprint": instance.imprint,
        "status": instance.status,
        "due_back": instance.due_back.isoformat() if instance.due_back else "",
    }


def render_instance_form(request: Request, title: str, books, bookinstance: Optional[dict] = None, errors=None):
    return render(request, "bookinstance_form", {
        "title": title,
        "book_list": books,
        "statuses": BOOK_INSTANCE_STATUSES,
        "bookinstance": bookinstance,
        "errors": errors or [],
    })


async def read_instance_form(request: Request, db: AsyncSession):
    values, form, violations = validate_form(BookInstanceForm, form_to_dict(await request.form()))
    if form is None:
        return values, None, violations

    book_id = reference_id(form.book)
    if book_id is None or await book_crud.get_book(db, book_id) is None:
        return values, None, [Violation(field="book", msg="Book does not exist.")]

    instance_data = BookInstanceCreate(
        book_id=book_id,
        imprint=form.imprint,
        status=form.status,
        due_back=form.due_back,
    )
    return values, instance_data, []


@router.get("/bookinstances")
async def bookinstance_list(request: Request, db: AsyncSession = Depends(get_db)):
    instances = await instance_crud.get_book_instances(db)
    return render(request, "bookinstance_list", {
        "title": "Book Instance List",
        "bookinstance_list": instances,
    })


@router.get("/bookinstance/create")
async def bookinstance_create_get(request: Request, db: AsyncSession = Depends(get_db)):
    books = await book_crud.get_books(db)
    return render_instance_form(request, "Create BookInstance", books)


@router.post("/bookinstance/create")
async def bookinstance_create_post(
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    values, instance_data, errors = await read_instance_form(request, db)
    if errors:
        books = await book_crud.get_books(db)
        return render_instance_form(request, "Create BookInstance", books, bookinstance=values, errors=errors)

    instance = await instance_crud.create_book_instance(db, instance_data)
    return RedirectResponse(instance.url, status_code=303)


@router.get("/bookinstance/{instance_id}/delete")
async def bookinstance_delete_get(instance_id: int, request: Request, db: AsyncSession = Depends(get_db)):
    instance = await instance_crud.get_book_instance(db, instance_id)
    if instance is None:
        return RedirectResponse(INSTANCE_LIST_URL, status_code=303)

    return render(request, "bookinstance_delete", {
        "title": "Delete BookInstance",
        "bookinstance": instance,
    })


@router.post("/bookinstance/{instance_id}/delete")
async def bookinstance_delete_post(instance_id: int, db: AsyncSession = Depends(get_db)):
    # Nothing depends on a copy
    await instance_crud.delete_book_instance(db, instance_id)
    return RedirectResponse(INSTANCE_LIST_URL, status_code=303)


@router.get("/bookinstance/{instance_id}/update")
async def bookinstance_update_get(
    instance_id: int,
    request: Request,
    session_factory: sessionmaker = Depends(get_sessionmaker),
):
    instance, books = await gather_reads(
        session_factory,
        partial(instance_crud.get_book_instance, instance_id=instance_id),
        book_crud.get_books,
    )
    if instance is None:
        raise HTTPException(status_code=404, detail="Book copy not found")

    return render_instance_form(request, "Update BookInstance", books, bookinstance=instance_form_values(instance))


@router.post("/bookinstance/{instance_id}/update")
async def bookinstance_update_post(
    instance_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    values, instance_data, errors = await read_instance_form(request, db)
    if errors:
        books = await book_crud.get_books(db)
        return render_instance_form(request, "Update BookInstance", books, bookinstance=values, errors=errors)

    instance = await instance_crud.update_book_instance(db, instance_id, instance_data)
    if instance is None:
        raise HTTPException(status_code=404, detail="Book copy not found")
    return RedirectResponse(instance.url, status_code=303)


@router.get("/bookinstance/{instance_id}")
async def bookinstance_detail(instance_id: int, request: Request, db: AsyncSession = Depends(get_db)):
    instance = await instance_crud.get_book_instance(db, instance_id)
    if instance is None:
        raise HTTPException(status_code=404, detail="Book copy not found")

    return render(request, "bookinstance_detail", {
        "title": f"Copy: {instance.book.title}",
        "bookinstance": instance,
    })
