import pytest

from foodapi.errors import ErrorType
from foodapi.exceptions import AppException
from foodapi.schemas.category import CategoryPayload
from foodapi.schemas.product import ProductPayload, ProductType
from foodapi.services.normalization import (
    coerce_boolean,
    coerce_string_list,
    flag_present,
    generate_slug,
    normalize_category_create,
    normalize_category_update,
    normalize_create,
    normalize_type,
    normalize_update,
)


def make_payload(**fields) -> ProductPayload:
    data = {
        "name": "Butter Chicken",
        "price": "349",
        "category_id": "2",
        "type": "non-veg",
        "image": "/images/dishes/butter-chicken.jpg",
    }
    data.update(fields)
    return ProductPayload.model_validate(data)


class TestCoerceBoolean:
    """Tests for coerce_boolean."""

    @pytest.mark.parametrize("value", [True, "true", "TRUE", "1", 1, " true "])
    def test_truthy(self, value):
        assert coerce_boolean(value) is True

    @pytest.mark.parametrize("value", [False, "false", "0", 0, "yes", "", "on"])
    def test_falsy(self, value):
        assert coerce_boolean(value, default=True) is False

    def test_absent_uses_default(self):
        assert coerce_boolean(None, default=True) is True
        assert coerce_boolean(None) is False


class TestCoerceStringList:
    """Tests for coerce_string_list."""

    def test_json_and_csv_agree(self):
        assert coerce_string_list('["a","b"]') == coerce_string_list("a, b") == ["a", "b"]

    def test_list_is_trimmed(self):
        assert coerce_string_list([" spicy ", "", "hot"]) == ["spicy", "hot"]

    def test_invalid_json_falls_back_to_csv(self):
        assert coerce_string_list('["a", b') == ['["a"', "b"]

    def test_json_scalar_is_split_as_text(self):
        assert coerce_string_list("42") == ["42"]

    def test_empty_values(self):
        assert coerce_string_list(None) == []
        assert coerce_string_list("   ") == []
        assert coerce_string_list("[]") == []


class TestSlug:
    """Tests for generate_slug."""

    def test_collapses_and_trims(self):
        assert generate_slug("  Chef's Special -- Biryani!! ") == "chef-s-special-biryani"

    def test_digits_kept(self):
        assert generate_slug("Combo 2 (Large)") == "combo-2-large"


class TestNormalizeType:
    """Tests for normalize_type."""

    @pytest.mark.parametrize("value", ["Veg", "VEG", "veg", " veg "])
    def test_veg_variants(self, value):
        assert normalize_type(value) == ProductType.VEG

    def test_non_veg(self):
        assert normalize_type("NON-VEG") == ProductType.NON_VEG

    def test_rejects_other_values(self):
        with pytest.raises(AppException) as exc_info:
            normalize_type("vegan")
        assert exc_info.value.error_type == ErrorType.VALIDATION
        assert exc_info.value.status_code == 400


class TestNormalizeCreate:
    """Tests for normalize_create."""

    def test_form_encoded_values(self):
        product = normalize_create(make_payload(
            tags="spicy, creamy",
            is_popular="1",
            is_featured="false",
            original_price="399",
        ))

        assert product.price == 349.0
        assert product.original_price == 399.0
        assert product.category_id == 2
        assert product.type == ProductType.NON_VEG
        assert product.tags == ["spicy", "creamy"]
        assert product.ingredients == []
        assert product.is_available is True
        assert product.is_popular is True
        assert product.is_featured is False
        assert product.prep_time == "15-20 min"
        assert product.description == ""

    def test_json_values(self):
        product = normalize_create(make_payload(
            price=349.5,
            category_id=2,
            tags=["spicy"],
            is_available=False,
            is_popular=True,
        ))

        assert product.price == 349.5
        assert product.tags == ["spicy"]
        assert product.is_available is False
        assert product.is_popular is True

    def test_upload_takes_precedence(self):
        product = normalize_create(make_payload(), uploaded_image="/uploads/products/abc.png")
        assert product.image == "/uploads/products/abc.png"

    def test_missing_fields_enumerated(self):
        payload = ProductPayload.model_validate({"name": "Soup", "type": "veg"})

        with pytest.raises(AppException) as exc_info:
            normalize_create(payload)

        assert exc_info.value.message == "Required fields: name, price, category_id, type, image"
        assert exc_info.value.detail == "Missing: price, category_id, image"

    def test_undefined_image_counts_as_missing(self):
        with pytest.raises(AppException) as exc_info:
            normalize_create(make_payload(image="undefined"))
        assert "image" in exc_info.value.detail

    def test_invalid_type(self):
        with pytest.raises(AppException) as exc_info:
            normalize_create(make_payload(type="vegan"))
        assert exc_info.value.error_type == ErrorType.VALIDATION

    @pytest.mark.parametrize("price", ["abc", "0", "-5"])
    def test_invalid_price(self, price):
        with pytest.raises(AppException) as exc_info:
            normalize_create(make_payload(price=price))
        assert exc_info.value.error_type == ErrorType.VALIDATION

    def test_invalid_category_id(self):
        with pytest.raises(AppException) as exc_info:
            normalize_create(make_payload(category_id="two"))
        assert exc_info.value.error_type == ErrorType.VALIDATION


class TestNormalizeUpdate:
    """Tests for normalize_update."""

    def test_empty_strings_are_dropped(self):
        payload = ProductPayload.model_validate({"name": "", "description": None, "price": "  "})

        with pytest.raises(AppException) as exc_info:
            normalize_update(payload)

        assert exc_info.value.message == "No data provided for update"
        assert exc_info.value.status_code == 400

    def test_empty_body(self):
        with pytest.raises(AppException) as exc_info:
            normalize_update(ProductPayload.model_validate({}))
        assert exc_info.value.message == "No data provided for update"

    def test_only_supplied_fields(self):
        changes = normalize_update(ProductPayload.model_validate({
            "price": "199",
            "is_popular": "true",
            "ingredients": '["rice", "saffron"]',
            "type": "Veg",
        }))

        assert changes.model_dump(exclude_unset=True, mode="json") == {
            "price": 199.0,
            "is_popular": True,
            "ingredients": ["rice", "saffron"],
            "type": "veg",
        }

    def test_undefined_image_keeps_stored_one(self):
        changes = normalize_update(ProductPayload.model_validate({"name": "Soup", "image": "undefined"}))
        assert "image" not in changes.model_dump(exclude_unset=True)

    def test_image_precedence(self):
        payload = ProductPayload.model_validate({"image": "/images/new.jpg"})

        assert normalize_update(payload).image == "/images/new.jpg"
        assert normalize_update(payload, uploaded_image="/uploads/products/x.png").image == "/uploads/products/x.png"

    def test_upload_alone_is_an_update(self):
        changes = normalize_update(ProductPayload.model_validate({}), uploaded_image="/uploads/products/x.png")
        assert changes.model_dump(exclude_unset=True) == {"image": "/uploads/products/x.png"}

    def test_unknown_field_is_schema_error(self):
        payload = ProductPayload.model_validate({"name": "Soup", "colour": "red"})

        with pytest.raises(AppException) as exc_info:
            normalize_update(payload)

        assert exc_info.value.error_type == ErrorType.SCHEMA
        assert exc_info.value.detail == "Unknown field(s): colour"


class TestNormalizeCategory:
    """Tests for category normalization."""

    def test_create_requires_name(self):
        with pytest.raises(AppException) as exc_info:
            normalize_category_create(CategoryPayload.model_validate({"description": "x"}))
        assert exc_info.value.message == "Required fields: name"

    def test_create_defaults(self):
        category = normalize_category_create(CategoryPayload.model_validate({"name": " Desserts ", "sort_order": "3"}))
        assert category.name == "Desserts"
        assert category.sort_order == 3
        assert category.is_active is True
        assert category.slug is None

    def test_update_coerces_flags(self):
        changes = normalize_category_update(CategoryPayload.model_validate({"is_active": "0"}))
        assert changes.model_dump(exclude_unset=True) == {"is_active": False}


class TestFlagPresent:
    """Tests for flag_present."""

    @pytest.mark.parametrize("value", ["true", "1", "yes", "on", True])
    def test_present(self, value):
        assert flag_present(value) is True

    @pytest.mark.parametrize("value", [None, "", "false", "FALSE", "0", False, 0])
    def test_absent(self, value):
        assert flag_present(value) is False


class TestOriginalPrice:
    """A zero original_price means there is no original price."""

    @pytest.mark.parametrize("value", ["0", 0, "0.00", ""])
    def test_create_treats_zero_as_none(self, value):
        assert normalize_create(make_payload(original_price=value)).original_price is None

    def test_update_zero_clears_original_price(self):
        changes = normalize_update(ProductPayload.model_validate({"original_price": "0"}))
        assert changes.model_dump(exclude_unset=True) == {"original_price": None}

    def test_negative_still_rejected(self):
        with pytest.raises(AppException) as exc_info:
            normalize_create(make_payload(original_price="-5"))

        assert exc_info.value.error_type == ErrorType.VALIDATION
