from django.db import models
from django.utils.translation import gettext_lazy as _


class Role(models.TextChoices):
    ORDINARY = "ordinary", _("Ordinary")
    ADMIN = "admin", _("Admin")
