"""
Expense category tree service.

The tree is read as an arena: one query loads every `(id, name, parent_id)`
row and path names are built by walking parent ids in memory.
"""

import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction as db_transaction

from ..exceptions import EntityNotFoundError
from ..models import ExpenseCategory

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "/"


def unknown_category_label():
    return getattr(settings, "LEDGER", {}).get("UNKNOWN_CATEGORY_LABEL", "Unknown")


class CategoryService:
    """
    Reads and maintains the shared expense category hierarchy.
    """

    @staticmethod
    def load_arena():
        """
        Load the whole category tree in one query.

        Returns:
            dict: category id -> (name, parent_id)
        """
        return {
            category_id: (name, parent_id)
            for category_id, name, parent_id in ExpenseCategory.objects.values_list(
                "id", "name", "parent_id"
            )
        }

    @staticmethod
    def path_name(category_id, arena=None):
        """
        Full hierarchical name of a category, e.g. "Home/Utilities/Water".

        A missing category yields the unknown label. A parent link that loops
        back onto an already visited node ends the walk.

        Args:
            category_id: Category to resolve
            arena: Pre-loaded tree from `load_arena`, loaded when omitted

        Returns:
            str: Names from the root down to the category, "/" separated
        """
        if arena is None:
            arena = CategoryService.load_arena()

        if category_id not in arena:
            logger.warning(
                "Category not found while resolving path name",
                extra={
                    "category_id": category_id,
                    "action": "category_path_unknown",
                    "component": "CategoryService",
                    "severity": "low",
                },
            )
            return unknown_category_label()

        names = []
        visited = set()
        current_id = category_id
        while current_id is not None and current_id in arena:
            if current_id in visited:
                logger.error(
                    "Cycle detected in category tree",
                    extra={
                        "category_id": category_id,
                        "cycle_at": current_id,
                        "action": "category_path_cycle",
                        "component": "CategoryService",
                        "severity": "high",
                    },
                )
                break
            visited.add(current_id)
            name, parent_id = arena[current_id]
            names.append(name)
            current_id = parent_id

        return PATH_SEPARATOR.join(reversed(names))

    @staticmethod
    def get_categories():
        return ExpenseCategory.objects.select_related("parent").order_by("id")

    @staticmethod
    def get_category(category_id):
        return ExpenseCategory.objects.select_related("parent").filter(pk=category_id).first()

    @staticmethod
    def get_parent(category_id):
        """Parent of a category, None for roots and unknown ids."""
        category = ExpenseCategory.objects.select_related("parent").filter(pk=category_id).first()
        if category is None:
            return None
        return category.parent

    @staticmethod
    @db_transaction.atomic
    def create_category(name, parent_id=None):
        """
        Create a category under an optional parent.

        Raises:
            ValidationError: If the name is too short or the parent is missing
        """
        if parent_id is not None and not ExpenseCategory.objects.filter(pk=parent_id).exists():
            raise ValidationError(f"Parent category {parent_id} does not exist")

        category = ExpenseCategory(name=(name or "").strip(), parent_id=parent_id)
        category.full_clean()
        category.save()

        logger.info(
            "Expense category created",
            extra={
                "category_id": category.id,
                "parent_id": parent_id,
                "action": "category_created",
                "component": "CategoryService",
            },
        )
        return category

    @staticmethod
    @db_transaction.atomic
    def move_category(category_id, parent_id):
        """
        Re-parent a category; `parent_id=None` makes it a root.

        Raises:
            EntityNotFoundError: If the category or new parent does not exist
            ValidationError: If the move would make the category its own ancestor
        """
        category = ExpenseCategory.objects.select_for_update().filter(pk=category_id).first()
        if category is None:
            raise EntityNotFoundError("ExpenseCategory", category_id)

        if parent_id is not None:
            arena = CategoryService.load_arena()
            if parent_id not in arena:
                raise EntityNotFoundError("ExpenseCategory", parent_id)

            # Walk up from the new parent; meeting the category means a cycle
            visited = set()
            current_id = parent_id
            while current_id is not None and current_id not in visited:
                if current_id == category.id:
                    logger.warning(
                        "Category move rejected - would create a cycle",
                        extra={
                            "category_id": category.id,
                            "parent_id": parent_id,
                            "action": "category_move_cycle",
                            "component": "CategoryService",
                            "severity": "medium",
                        },
                    )
                    raise ValidationError("Category cannot become its own ancestor")
                visited.add(current_id)
                current_id = arena[current_id][1] if current_id in arena else None

        old_parent_id = category.parent_id
        category.parent_id = parent_id
        category.save(update_fields=["parent"])

        logger.info(
            "Expense category moved",
            extra={
                "category_id": category.id,
                "old_parent_id": old_parent_id,
                "parent_id": parent_id,
                "action": "category_moved",
                "component": "CategoryService",
            },
        )
        return category
