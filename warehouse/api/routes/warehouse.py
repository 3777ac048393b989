from fastapi import APIRouter, Depends, HTTPException, status

from warehouse.api.deps import get_store, http_error
from warehouse.core.errors import StoreError, WarehouseError
from warehouse.db.store import DocumentStore
from warehouse.schemas.documents import CategoryRecord, ProductRecord
from warehouse.schemas.warehouse import (
    ExpenseSubmitOut,
    ExpenseSubmitRequest,
    ExpenseTotals,
    IncomeHeaderOut,
    IncomeSubmitRequest,
    ProductActionOut,
    ProductDetailOut,
    QuantityChangeRequest,
    SubmitOutcome,
)
from warehouse.services.action_menu import ActionMenu
from warehouse.services.categories import CategoryAccessor
from warehouse.services.expense import ExpenseDocument
from warehouse.services.income import IncomeDocument
from warehouse.services.product_details import ProductDetailScreen, ScreenState, get_product, list_products

router = APIRouter(prefix="/warehouse", tags=["Warehouse"])

FAILURE_STATUS = {
    "validation": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "store": status.HTTP_502_BAD_GATEWAY,
}


def _loaded_screen(store: DocumentStore, product_id: str) -> ProductDetailScreen:
    screen = ProductDetailScreen(store, product_id)
    state = screen.load()
    if state == ScreenState.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=screen.error)
    if state == ScreenState.LOAD_ERROR:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=screen.error)
    return screen


def _outcome_or_error(outcome: SubmitOutcome) -> SubmitOutcome:
    if outcome.ok:
        return outcome
    raise HTTPException(
        status_code=FAILURE_STATUS.get(outcome.failure or "store", status.HTTP_502_BAD_GATEWAY),
        detail=outcome.notice.message if outcome.notice else None,
    )


def _categories(store: DocumentStore) -> CategoryAccessor:
    accessor = CategoryAccessor(store)
    accessor.list_categories()
    if accessor.error:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=accessor.error)
    return accessor


def _expense_document(store: DocumentStore, payload: ExpenseSubmitRequest) -> ExpenseDocument:
    document = ExpenseDocument(store, document_date=payload.document_date)
    document.selected_project = payload.project_id.strip()
    if payload.document_number:
        document.document_number = payload.document_number
    if payload.note:
        document.note = payload.note.strip()
    if not document.selected_project:
        return document
    for item in payload.items:
        try:
            product = get_product(store, item.product_id)
        except WarehouseError as exc:
            raise http_error(exc) from exc
        document.add_item(product, item.quantity)
    return document


@router.get("/products", response_model=list[ProductRecord])
def list_warehouse_products(store: DocumentStore = Depends(get_store)):
    try:
        return list_products(store)
    except StoreError as exc:
        raise http_error(exc) from exc


@router.get("/products/{product_id}", response_model=ProductDetailOut)
def product_details(product_id: str, store: DocumentStore = Depends(get_store)):
    return _loaded_screen(store, product_id).view()


@router.post("/products/{product_id}/quantity", response_model=ProductDetailOut)
def change_product_quantity(
    product_id: str,
    payload: QuantityChangeRequest,
    store: DocumentStore = Depends(get_store),
):
    screen = _loaded_screen(store, product_id)
    if not screen.adjust_quantity(payload.delta) and screen.notice is not None:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=screen.notice.message)
    return screen.view()


@router.delete("/products/{product_id}", response_model=SubmitOutcome)
def delete_warehouse_product(
    product_id: str,
    confirm: bool = False,
    store: DocumentStore = Depends(get_store),
):
    screen = _loaded_screen(store, product_id)
    try:
        if confirm:
            screen.request_delete()
        outcome = screen.confirm_delete()
    except WarehouseError as exc:
        raise http_error(exc) from exc
    return _outcome_or_error(outcome)


@router.get("/products/{product_id}/actions", response_model=list[ProductActionOut])
def product_actions(product_id: str, store: DocumentStore = Depends(get_store)):
    try:
        product = get_product(store, product_id)
    except WarehouseError as exc:
        raise http_error(exc) from exc
    menu = ActionMenu(product)
    return [ProductActionOut(action=action.value, label=action.label) for action in menu.actions()]


@router.get("/categories", response_model=list[CategoryRecord])
def list_categories(store: DocumentStore = Depends(get_store)):
    return _categories(store).categories


@router.get("/categories/employees", response_model=list[CategoryRecord])
def list_employee_categories(store: DocumentStore = Depends(get_store)):
    return _categories(store).employee_categories


@router.get("/categories/projects", response_model=list[CategoryRecord])
def list_project_categories(store: DocumentStore = Depends(get_store)):
    return _categories(store).project_categories


@router.post("/expenses/totals", response_model=ExpenseTotals)
def expense_totals(payload: ExpenseSubmitRequest, store: DocumentStore = Depends(get_store)):
    document = ExpenseDocument(store)
    for item in payload.items:
        try:
            product = get_product(store, item.product_id)
        except WarehouseError as exc:
            raise http_error(exc) from exc
        document.add_item(product, item.quantity)
    return document.totals


@router.post("/expenses", response_model=ExpenseSubmitOut, status_code=status.HTTP_201_CREATED)
def submit_expense_document(payload: ExpenseSubmitRequest, store: DocumentStore = Depends(get_store)):
    document = _expense_document(store, payload)
    totals = document.totals
    outcome = _outcome_or_error(document.submit())
    return ExpenseSubmitOut(notice=outcome.notice, redirect_to=outcome.redirect_to, totals=totals)


@router.get("/income/new", response_model=IncomeHeaderOut)
def new_income_document(store: DocumentStore = Depends(get_store)):
    return IncomeDocument(store).header()


@router.post("/income", status_code=status.HTTP_201_CREATED)
def submit_income_document(payload: IncomeSubmitRequest, store: DocumentStore = Depends(get_store)):
    document = IncomeDocument(store, document_date=payload.document_date)
    if payload.document_number:
        document.document_number = payload.document_number
    if payload.note:
        document.note = payload.note.strip()
    try:
        if payload.supplier_id:
            document.select_supplier(payload.supplier_id)
        document.submit_income()
    except WarehouseError as exc:
        raise http_error(exc) from exc
