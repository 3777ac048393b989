# User-visible texts. Kept in one place so the front-end and tests agree on them.

SELECT_PROJECT = "Выберите проект"
ADD_PRODUCTS = "Добавьте товары"
PROJECT_NOT_FOUND = "Проект не найден"
EXPENSE_POSTED = "Товары успешно списаны на проект"
EXPENSE_FAILED = "Ошибка при списании товаров"
INVALID_QUANTITY = "Количество должно быть больше нуля"
INSUFFICIENT_STOCK = "Недостаточно товара на складе: {name}"

PRODUCT_NOT_FOUND = "Товар не найден"
PRODUCT_LOAD_FAILED = "Ошибка при загрузке товара"
PRODUCT_DELETED = "Товар успешно удален"
PRODUCT_DELETE_FAILED = "Ошибка при удалении товара"
QUANTITY_UPDATE_FAILED = "Ошибка при изменении количества"
CONFIRM_DELETE = 'Вы уверены, что хотите удалить товар "{name}"? Это действие нельзя будет отменить.'
DELETE_NOT_CONFIRMED = "Удаление товара не подтверждено"

CATEGORIES_LOAD_FAILED = "Ошибка при загрузке категорий"
SUPPLIER_NOT_EMPLOYEE = "Поставщик должен быть сотрудником"
INCOME_NOT_SUPPORTED = "Оприходование товаров пока не поддерживается"

IN_STOCK = "В наличии"
OUT_OF_STOCK = "Нет в наличии"

EXPENSE_DESCRIPTION = "Списание со склада: {name} ({quantity} {unit})"

ACTION_MOVE_TO_FOLDER = "Переместить в папку"
ACTION_VIEW_MOVEMENT = "Движение товара"
ACTION_VIEW_STOCK = "Наличие на складах"
ACTION_DELETE = "Удалить"
