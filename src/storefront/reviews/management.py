"""Review commands and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from storefront.accounts.user import User
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.reviews.review import Review
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Review")
class SubmitReview:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    rating = Integer(required=True)
    comment = Text()


@storefront.command(part_of="Review")
class EditReview:
    review_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer()
    comment = Text()


@storefront.command(part_of="Review")
class RemoveReview:
    review_id = Identifier(required=True)
    user_id = Identifier(required=True)


@storefront.command_handler(part_of=Review)
class ReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        current_domain.repository_for(User).get(command.user_id)
        current_domain.repository_for(Product).get(command.product_id)

        repo = current_domain.repository_for(Review)
        if repo.by_author(command.user_id, command.product_id) is not None:
            raise ValidationError({"product_id": ["You have already reviewed this product"]})

        review = Review.submit(
            user_id=command.user_id,
            product_id=command.product_id,
            rating=command.rating,
            comment=command.comment,
        )
        repo.add(review)

        logger.info("Review submitted", review_id=str(review.id), product_id=str(command.product_id))
        return str(review.id)

    @handle(EditReview)
    def edit_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)
        review.assert_author(command.user_id)

        review.edit(rating=command.rating, comment=command.comment)
        repo.add(review)
        return str(review.id)

    @handle(RemoveReview)
    def remove_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)
        review.assert_author(command.user_id)

        repo._dao.delete(review)

        logger.info("Review removed", review_id=str(review.id), user_id=str(command.user_id))
        return str(review.id)
