"""Review aggregate: one user's rating of one product."""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Integer, Text

from storefront.domain import storefront
from storefront.shared.errors import ForbiddenError


@storefront.aggregate
class Review:
    user_id: Identifier(required=True)
    product_id: Identifier(required=True)
    rating: Integer(required=True, min_value=1, max_value=5)
    comment: Text()
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def submit(cls, user_id, product_id, rating, comment=None):
        from storefront.reviews.events import ReviewSubmitted

        now = datetime.now(UTC)
        review = cls(
            user_id=user_id,
            product_id=product_id,
            rating=rating,
            comment=comment,
            created_at=now,
            updated_at=now,
        )
        review.raise_(
            ReviewSubmitted(
                review_id=review.id,
                user_id=user_id,
                product_id=product_id,
                rating=rating,
            )
        )
        return review

    def assert_author(self, user_id):
        if str(self.user_id) != str(user_id):
            raise ForbiddenError({"review_id": ["Only the author can change this review"]})

    def edit(self, rating=None, comment=None):
        from storefront.reviews.events import ReviewEdited

        if rating is not None:
            self.rating = rating
        if comment is not None:
            self.comment = comment

        self.updated_at = datetime.now(UTC)
        self.raise_(
            ReviewEdited(
                review_id=self.id,
                product_id=self.product_id,
                rating=self.rating,
            )
        )
