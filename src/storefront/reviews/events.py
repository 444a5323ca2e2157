from protean.fields import Identifier, Integer

from storefront.domain import storefront


@storefront.event(part_of="Review")
class ReviewSubmitted:
    __version__ = 1

    review_id: Identifier(required=True)
    user_id: Identifier(required=True)
    product_id: Identifier(required=True)
    rating: Integer(required=True)


@storefront.event(part_of="Review")
class ReviewEdited:
    __version__ = 1

    review_id: Identifier(required=True)
    product_id: Identifier(required=True)
    rating: Integer(required=True)
