"""Unit tests for query builder state and parameter encoding (no transport calls)."""

import pytest

from civitai_client.client import CivitaiClient
from civitai_client.kernel.errors import ErrorCode
from civitai_client.kernel.registry import EnumStringRegistry
from civitai_client.kernel.result import Failure, Success
from civitai_client.query.images import ImageQuery
from civitai_client.query.models import ModelQuery
from civitai_client.schemas.enums import (
    CommercialUsePermission,
    ImageNsfwLevel,
    ImageSort,
    ModelSort,
    ModelType,
    TimePeriod,
)


@pytest.fixture
def client(settings, transport):
    return CivitaiClient(settings=settings, transport=transport)


def params_of(builder, cursor=None):
    result = builder.params(cursor)
    assert isinstance(result, Success), result
    return result.value


def error_of(builder):
    result = builder.params()
    assert isinstance(result, Failure), result
    return result.error


class TestImmutability:
    """Fluent calls return new builders and never touch the receiver."""

    def test_snapshot_is_not_mutated(self, client):
        b1 = client.models.with_results_limit(10)
        b2 = b1.with_results_limit(20)
        assert b1.state.results_limit == 10
        assert b2.state.results_limit == 20
        assert b1 is not b2

    def test_branching_from_shared_ancestor(self, client):
        base = client.models.where_tag("anime")
        left = base.where_name("left")
        right = base.where_name("right")
        assert dict(base.state.filters) == {"tag": ("anime",)}
        assert left.state.filters["query"] == "left"
        assert right.state.filters["query"] == "right"

    def test_facade_returns_fresh_builders(self, client):
        client.models.where_name("x")
        assert dict(client.models.state.filters) == {}

    def test_state_filters_are_read_only(self, client):
        state = client.models.where_name("x").state
        with pytest.raises(TypeError):
            state.filters["query"] = "y"  # type: ignore[index]


class TestReplaceSemantics:
    """Non-cumulative fields: the last call wins."""

    @pytest.mark.parametrize(
        "apply_a, apply_b",
        [
            (lambda q: q.where_name("a"), lambda q: q.where_name("b")),
            (lambda q: q.where_username("alice"), lambda q: q.where_username("bob")),
            (lambda q: q.where_period(TimePeriod.DAY), lambda q: q.where_period(TimePeriod.WEEK)),
            (lambda q: q.where_nsfw(True), lambda q: q.where_nsfw(False)),
            (lambda q: q.order_by(ModelSort.NEWEST), lambda q: q.order_by(ModelSort.HIGHEST_RATED)),
            (lambda q: q.with_page_index(2), lambda q: q.with_page_index(5)),
        ],
    )
    def test_second_call_equals_fresh_call(self, client, apply_a, apply_b):
        assert apply_b(apply_a(client.models)).state == apply_b(client.models).state

    def test_valid_value_clears_earlier_problem(self, client):
        query = client.models.where_name("  ").where_name("anime")
        assert query.state == client.models.where_name("anime").state
        assert isinstance(query.params(), Success)

    def test_image_ids_replace(self, client):
        query = client.images.where_model_id(1).where_model_id(2)
        assert ("modelId", "2") in params_of(query)
        assert ("modelId", "1") not in params_of(query)


class TestCumulativeSemantics:
    """Cumulative fields: union with duplicates removed, insertion order kept."""

    def test_tags_accumulate(self, client):
        query = client.models.where_tag("anime", "style").where_tag("style", "portrait")
        assert query.state.filters["tag"] == ("anime", "style", "portrait")
        assert [v for k, v in params_of(query) if k == "tag"] == ["anime", "style", "portrait"]

    def test_types_accumulate(self, client):
        query = client.models.where_type(ModelType.LORA).where_type(ModelType.CHECKPOINT, ModelType.LORA)
        assert query.state.filters["types"] == (ModelType.LORA, ModelType.CHECKPOINT)
        assert [v for k, v in params_of(query) if k == "types"] == ["LORA", "Checkpoint"]

    def test_ids_accumulate(self, client):
        query = client.models.where_ids(1, 2).where_ids(2, 3)
        assert [v for k, v in params_of(query) if k == "ids"] == ["1", "2", "3"]

    def test_base_models_and_commercial_use_accumulate(self, client):
        query = (
            client.models.where_base_model("SDXL 1.0")
            .where_base_models("Pony", "SDXL 1.0")
            .where_commercial_use(CommercialUsePermission.IMAGE)
            .where_commercial_use(CommercialUsePermission.RENT_CIVIT)
        )
        params = params_of(query)
        assert [v for k, v in params if k == "baseModels"] == ["SDXL 1.0", "Pony"]
        assert [v for k, v in params if k == "allowCommercialUse"] == ["Image", "RentCivit"]

    def test_valid_add_clears_earlier_problem(self, client):
        """A later valid add recovers from an earlier rejected one, as replace fields do."""
        tags = client.models.where_tag("").where_tag("anime")
        ids = client.models.where_ids(0).where_ids(5)
        assert [v for k, v in params_of(tags) if k == "tag"] == ["anime"]
        assert [v for k, v in params_of(ids) if k == "ids"] == ["5"]
        assert "tag" not in tags.state.problems


class TestEncoding:
    """Wire parameters produced by params()."""

    def test_enum_filter_goes_through_registry(self, client):
        """where_type(LORA) sends types=LORA."""
        assert ("types", "LORA") in params_of(client.models.where_type(ModelType.LORA))

    def test_booleans_are_lowercase(self, client):
        params = params_of(client.models.where_nsfw(False).where_favorites())
        assert ("nsfw", "false") in params
        assert ("favorites", "true") in params

    def test_sort_and_period(self, client):
        params = params_of(client.models.order_by(ModelSort.MOST_DOWNLOADED).where_period(TimePeriod.ALL_TIME))
        assert ("sort", "Most Downloaded") in params
        assert ("period", "AllTime") in params

    def test_image_filters(self, client):
        params = params_of(
            client.images.where_nsfw(ImageNsfwLevel.EXPLICIT)
            .order_by(ImageSort.MOST_REACTIONS)
            .where_post_id(77)
            .where_username("alice_01")
        )
        assert ("nsfw", "X") in params
        assert ("sort", "Most Reactions") in params
        assert ("postId", "77") in params
        assert ("username", "alice_01") in params

    def test_limit_and_page(self, client):
        params = params_of(client.tags.with_results_limit(50).with_page_index(3))
        assert params == [("limit", "50"), ("page", "3")]

    def test_cursor_takes_precedence_over_page(self, client):
        params = params_of(client.models.with_page_index(3), cursor="abc")
        assert ("cursor", "abc") in params
        assert all(key != "page" for key, _ in params)

    def test_blank_cursor_is_ignored(self, client):
        params = params_of(client.models.with_page_index(2), cursor="   ")
        assert ("page", "2") in params
        assert all(key != "cursor" for key, _ in params)

    def test_unmapped_variant_is_reported(self, settings, transport):
        query = ModelQuery(transport, settings, EnumStringRegistry()).where_type(ModelType.LORA)
        error = error_of(query)
        assert error.code == ErrorCode.UNMAPPED_VARIANT


class TestValidation:
    """Invalid input is recorded and reported as INVALID_QUERY_PARAMETER."""

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_empty_name(self, client, name):
        error = error_of(client.models.where_name(name))
        assert error.code == ErrorCode.INVALID_QUERY_PARAMETER
        assert error.field == "query"

    @pytest.mark.parametrize("username", ["bad name", "semi;colon", ""])
    def test_invalid_username(self, client, username):
        assert error_of(client.models.where_username(username)).field == "username"

    @pytest.mark.parametrize("limit", [0, -1, 101])
    def test_model_limit_out_of_bounds(self, client, limit):
        error = error_of(client.models.with_results_limit(limit))
        assert error.code == ErrorCode.INVALID_QUERY_PARAMETER
        assert error.field == "limit"

    def test_image_limit_bounds(self, client):
        assert isinstance(client.images.with_results_limit(200).params(), Success)
        assert isinstance(client.images.with_results_limit(201).params(), Failure)
        assert isinstance(client.creators.with_results_limit(200).params(), Success)

    def test_page_index_must_be_positive(self, client):
        assert error_of(client.tags.with_page_index(0)).field == "page"

    def test_non_positive_ids(self, client):
        assert error_of(client.models.where_ids(1, 0)).field == "ids"
        assert error_of(client.images.where_model_version_id(-5)).field == "modelVersionId"

    def test_empty_cumulative_call(self, client):
        assert error_of(client.models.where_tag()).field == "tag"

    def test_wrong_enum_type(self, client):
        assert error_of(client.models.where_type("LORA")).field == "types"
        assert error_of(client.images.order_by(ModelSort.NEWEST)).field == "sort"

    def test_limit_problem_reported_before_filter_problem(self, client):
        error = error_of(client.models.where_name("").with_results_limit(0))
        assert error.field == "limit"

    def test_image_query_class_bounds(self):
        assert ImageQuery.MAX_RESULTS_LIMIT == 200
        assert ModelQuery.MAX_RESULTS_LIMIT == 100
