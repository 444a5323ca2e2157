"""EmailAddress value object for validated email addresses."""

import re

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from storefront.domain import storefront

_EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+\-]+@[A-Za-z0-9\-]+(\.[A-Za-z0-9\-]+)+$")


@storefront.value_object
class EmailAddress:
    """A syntactically valid email address: one ``@``, a dotted domain, no spaces."""

    address: String(required=True, max_length=254)

    @invariant.post
    def verify_email_address(self):
        email = self.address
        if not email or not _EMAIL_PATTERN.match(email):
            raise ValidationError({"email": [f"Invalid email address: {email!r}"]})

        local_part, domain_part = email.split("@", 1)
        if local_part.startswith(".") or local_part.endswith(".") or ".." in email:
            raise ValidationError({"email": [f"Invalid email address: {email!r}"]})

        for label in domain_part.split("."):
            if label.startswith("-") or label.endswith("-"):
                raise ValidationError({"email": [f"Invalid email address: {email!r}"]})
