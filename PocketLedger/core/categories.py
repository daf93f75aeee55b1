"""
Default and user-defined expense categories.

Default categories are shared by every user and are never stored. Custom categories
are kept as a JSON list under :data:`~PocketLedger.core.storage.CATEGORIES_KEY`, each
tagged with the owning user's id.
"""

import copy
import logging
import re
from typing import Any, Dict, Iterable, List, Sequence

from . import storage
from ..status import status

FALLBACK_CATEGORY_ID = 'other'

DEFAULT_CATEGORIES: List[Dict[str, str]] = [
    {'id': 'food', 'name': 'Food', 'icon': '🍔', 'color': '#FF6B6B'},
    {'id': 'transport', 'name': 'Transport', 'icon': '🚗', 'color': '#4ECDC4'},
    {'id': 'entertainment', 'name': 'Entertainment', 'icon': '🎬', 'color': '#95E1D3'},
    {'id': 'bills', 'name': 'Bills', 'icon': '💡', 'color': '#F38181'},
    {'id': 'shopping', 'name': 'Shopping', 'icon': '🛍️', 'color': '#AA96DA'},
    {'id': 'health', 'name': 'Health', 'icon': '🏥', 'color': '#FCBAD3'},
    {'id': 'education', 'name': 'Education', 'icon': '📚', 'color': '#A8E6CF'},
    {'id': FALLBACK_CATEGORY_ID, 'name': 'Other', 'icon': '📦', 'color': '#D3D3D3'},
]


def is_valid_hex_color(value: str) -> bool:
    """Check if a string is a valid hexadecimal color in #RRGGBB format.

    Args:
        value (str): Color string to validate.

    Returns:
        bool: True if value matches '#RRGGBB', False otherwise.
    """
    return isinstance(value, str) and bool(re.fullmatch(r'#[0-9A-Fa-f]{6}', value))


def _validate_category(data: Dict[str, Any], partial: bool = False) -> None:
    if not partial or 'name' in data:
        name = data.get('name')
        if not isinstance(name, str) or not name.strip():
            raise status.CategoryInvalidException('Category name must be a non-empty string.')
    if not partial or 'color' in data:
        if not is_valid_hex_color(data.get('color')):
            raise status.CategoryInvalidException(
                f'Category color must be a valid hex color (#RRGGBB), got "{data.get("color")}".'
            )


def get_category_by_id(category_id: str, categories: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """Find a category by id, falling back to the default "other" category."""
    for category in categories:
        if category.get('id') == category_id:
            return category
    return next(c for c in DEFAULT_CATEGORIES if c['id'] == FALLBACK_CATEGORY_ID)


class CategoryService:
    """Reads and edits expense categories.

    Args:
        store: Key-value store holding the custom categories.
    """

    def __init__(self, store: storage.KeyValueStore) -> None:
        self.store = store

    def _categories(self) -> List[Dict[str, Any]]:
        return storage.load_json(self.store, storage.CATEGORIES_KEY, [])

    def _save_categories(self, categories: List[Dict[str, Any]]) -> None:
        storage.dump_json(self.store, storage.CATEGORIES_KEY, categories)

    @staticmethod
    def _notify(user_ids: Iterable[str]) -> None:
        from ..ui.actions import signals
        for user_id in sorted(set(user_ids)):
            signals.categoriesChanged.emit(user_id)

    def get_user_categories(self, user_id: str) -> List[Dict[str, Any]]:
        """Return the default categories followed by the user's own."""
        custom = [c for c in self._categories() if c.get('userId') == user_id]
        return copy.deepcopy(DEFAULT_CATEGORIES) + custom

    def add_category(self, user_id: str, data: Dict[str, Any]) -> str:
        """Add a custom category for a user.

        Raises:
            status.CategoryInvalidException: If the name or color is invalid.

        Returns:
            str: The new category id.
        """
        _validate_category(data)

        categories = self._categories()
        category = {
            'id': storage.make_id(),
            **data,
            'userId': user_id,
            'createdAt': storage.now_str(),
        }
        categories.append(category)
        self._save_categories(categories)

        logging.debug(f'Added category {category["id"]} for user {user_id}')
        self._notify([user_id])
        return category['id']

    def update_category(self, category_id: str, data: Dict[str, Any]) -> None:
        """Merge `data` into a custom category.

        Raises:
            status.CategoryNotFoundException: If the category does not exist.
            status.CategoryInvalidException: If the new name or color is invalid.
        """
        _validate_category(data, partial=True)

        categories = self._categories()
        for idx, category in enumerate(categories):
            if category.get('id') == category_id:
                categories[idx] = {**category, **data, 'id': category_id}
                self._save_categories(categories)
                self._notify([category.get('userId', '')])
                return
        raise status.CategoryNotFoundException(category_id)

    def delete_category(self, category_id: str) -> None:
        categories = self._categories()
        remaining = [c for c in categories if c.get('id') != category_id]
        if len(remaining) == len(categories):
            logging.debug(f'Category {category_id} not found, nothing to delete')
        self._save_categories(remaining)
        self._notify(c.get('userId', '') for c in categories if c.get('id') == category_id)
