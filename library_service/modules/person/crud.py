"""CRUD operations for person entities using FastCRUD."""

from fastcrud import FastCRUD

from .models import Person

person_crud: FastCRUD = FastCRUD(Person)
