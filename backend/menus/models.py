import uuid

from django.db import models
from django.db.models import F

from business.managers import BusinessScopedManager


class Menu(models.Model):
    """
    A dated, versioned menu a business publishes for ordering.

    Orders reference the menu by id and are checked against its status and
    validity window at order time; prices are frozen per order item, not
    pinned to a menu version.
    """

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PUBLISHED = "published", "Published"
        ARCHIVED = "archived", "Archived"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    business = models.ForeignKey('business.Business', on_delete=models.CASCADE, related_name='menus')
    title = models.CharField(max_length=255)
    start_date = models.DateTimeField(null=True, blank=True, help_text="Orderable from (open when empty)")
    end_date = models.DateTimeField(null=True, blank=True, help_text="Orderable until (open when empty)")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    version = models.PositiveIntegerField(default=1, editable=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BusinessScopedManager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["business", "status"], name="menu_business_status_idx"),
        ]

    def __str__(self):
        return f"{self.title} v{self.version} ({self.get_status_display()})"

    def save(self, *args, **kwargs):
        # Every edit of an existing menu bumps its version.
        if not self._state.adding:
            self.version = F("version") + 1
            update_fields = kwargs.get("update_fields")
            if update_fields is not None:
                kwargs["update_fields"] = set(update_fields) | {"version"}
            super().save(*args, **kwargs)
            self.refresh_from_db(fields=["version"])
            return
        super().save(*args, **kwargs)


class Dish(models.Model):
    """A catalog item. ``price_cents`` is the live price; orders copy it."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    business = models.ForeignKey('business.Business', on_delete=models.CASCADE, related_name='dishes')
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    price_cents = models.PositiveIntegerField()
    is_available = models.BooleanField(default=True)
    category = models.CharField(max_length=100, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BusinessScopedManager()

    class Meta:
        ordering = ["category", "name"]
        verbose_name_plural = "dishes"
        indexes = [
            models.Index(fields=["business", "is_available"], name="dish_business_avail_idx"),
        ]

    def __str__(self):
        return self.name
