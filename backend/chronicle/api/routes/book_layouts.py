from __future__ import annotations

from fastapi import APIRouter

from chronicle.core.book_layouts import list_layouts


router = APIRouter()


@router.get("")
def get_book_layouts() -> dict:
    return list_layouts()
