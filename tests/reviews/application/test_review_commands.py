import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.reviews.management import EditReview, RemoveReview, SubmitReview
from storefront.reviews.review import Review
from storefront.shared.errors import ForbiddenError


@pytest.fixture
def product(create_product):
    return create_product(name="Ceramic Mug")


def _submit(user_id, product_id, rating=4, comment=None):
    return current_domain.process(
        SubmitReview(user_id=user_id, product_id=product_id, rating=rating, comment=comment),
        asynchronous=False,
    )


class TestSubmitReview:
    def test_submit(self, customer, product):
        review_id = _submit(customer, product, rating=5, comment="Keeps coffee warm")
        review = current_domain.repository_for(Review).get(review_id)
        assert review.rating == 5
        assert review.product_id == product

    def test_second_review_is_rejected(self, customer, product):
        _submit(customer, product)
        with pytest.raises(ValidationError):
            _submit(customer, product, rating=1)

    def test_unknown_product(self, customer):
        with pytest.raises(ObjectNotFoundError):
            _submit(customer, "no-such-product")

    def test_unknown_user(self, product):
        with pytest.raises(ObjectNotFoundError):
            _submit("nobody", product)

    def test_reviews_for_product(self, customer, register_user, product, create_product):
        _submit(customer, product)
        _submit(register_user(username="bob"), product, rating=2)
        _submit(customer, create_product(name="Other"))
        assert len(current_domain.repository_for(Review).for_product(product)) == 2

    def test_busy_product_lists_every_review(self, register_user, product):
        for number in range(105):
            _submit(register_user(username=f"reviewer{number:03d}"), product)
        repo = current_domain.repository_for(Review)
        assert len(repo.for_product(product)) == 105

        last_page = repo.page_for_product(product, page=10, size=10)
        assert len(last_page.items) == 5
        assert last_page.total == 105


class TestEditAndRemove:
    def test_author_can_edit(self, customer, product):
        review_id = _submit(customer, product)
        current_domain.process(EditReview(review_id=review_id, user_id=customer, rating=2), asynchronous=False)
        assert current_domain.repository_for(Review).get(review_id).rating == 2

    def test_other_user_cannot_edit(self, customer, register_user, product):
        review_id = _submit(customer, product)
        with pytest.raises(ForbiddenError):
            current_domain.process(
                EditReview(review_id=review_id, user_id=register_user(username="bob"), rating=1),
                asynchronous=False,
            )

    def test_author_can_remove(self, customer, product):
        review_id = _submit(customer, product)
        current_domain.process(RemoveReview(review_id=review_id, user_id=customer), asynchronous=False)
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Review).get(review_id)

    def test_other_user_cannot_remove(self, customer, register_user, product):
        review_id = _submit(customer, product)
        with pytest.raises(ForbiddenError):
            current_domain.process(
                RemoveReview(review_id=review_id, user_id=register_user(username="bob")),
                asynchronous=False,
            )
