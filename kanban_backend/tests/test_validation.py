import pytest

from kanban_api.errors import ValidationError
from kanban_api.schemas import CategoryCreate, TaskCategoryUpdate, TaskCreate, TaskStatusUpdate, TaskUpdate
from kanban_api.validation import format_request_errors, validate_required


class TestValidateRequired:
    def test_complete_task_passes(self):
        validate_required(TaskCreate(title="Fix bug", description="desc", category_id=1))

    @pytest.mark.parametrize(
        "dto, message",
        [
            (CategoryCreate(), "type is required"),
            (CategoryCreate(type="   "), "type is required"),
            (TaskCreate(description="d", category_id=1), "title is required"),
            (TaskCreate(title="t", category_id=1), "description is required"),
            (TaskCreate(title="t", description="d", category_id=0), "category_id is required"),
            (TaskUpdate(title="t", description=""), "description is required"),
            (TaskStatusUpdate(), "status is required"),
            (TaskCategoryUpdate(category_id=0), "category_id is required"),
        ],
    )
    def test_rejections(self, dto, message):
        with pytest.raises(ValidationError) as exc_info:
            validate_required(dto)
        assert exc_info.value.message == message

    def test_false_status_is_a_value(self):
        validate_required(TaskStatusUpdate(status=False))

    def test_explicit_field_list(self):
        dto = TaskCreate(title="t")
        validate_required(dto, ["title"])
        with pytest.raises(ValidationError):
            validate_required(dto, ["title", "category_id"])

    def test_reports_fields_in_declared_order(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_required(TaskCreate())
        assert exc_info.value.message == "title is required"


class TestFormatRequestErrors:
    def test_strips_location_prefix(self):
        errors = [{"loc": ("body", "category_id"), "msg": "Input should be a valid integer", "type": "int_parsing"}]
        assert format_request_errors(errors) == "category_id: Input should be a valid integer"

    def test_only_first_error(self):
        errors = [
            {"loc": ("path", "task_id"), "msg": "bad id", "type": "int_parsing"},
            {"loc": ("body", "status"), "msg": "bad status", "type": "bool_parsing"},
        ]
        assert format_request_errors(errors) == "task_id: bad id"

    def test_missing_body(self):
        errors = [{"loc": ("body",), "msg": "Field required", "type": "missing"}]
        assert format_request_errors(errors) == "body: Field required"

    def test_invalid_json(self):
        errors = [{"loc": ("body", 9), "msg": "JSON decode error", "type": "json_invalid"}]
        assert format_request_errors(errors) == "invalid JSON body"

    def test_no_errors(self):
        assert format_request_errors([]) == "invalid request"
