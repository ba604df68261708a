"""Error Hierarchy — codes, HTTP statuses, and the REST envelope."""

from worksync.core.errors import (
    ConstraintViolationError, EntityValidationError, ErrorCategory, ErrorSeverity,
    GatewayError, NoWorkspaceAvailableError, NotAuthenticatedError,
    RemoteUnavailableError, ResourceNotFoundError, RowNotFoundError,
    StaleRevisionError, UnknownColumnError, WorkSyncError,
)


def test_gateway_errors_share_one_base():
    for exc in (
        RemoteUnavailableError("down", "select projects"),
        ConstraintViolationError("fk", "insert tasks"),
        RowNotFoundError("tasks", "t1", "update tasks"),
        StaleRevisionError("projects", "p1", {"milestones_revision": 2}),
        UnknownColumnError("projects", "rank", "select projects"),
    ):
        assert isinstance(exc, GatewayError)
        assert isinstance(exc, WorkSyncError)


def test_http_statuses():
    assert EntityValidationError("bad").http_status == 400
    assert NotAuthenticatedError().http_status == 401
    assert ResourceNotFoundError("Project", "p1").http_status == 404
    assert NoWorkspaceAvailableError().http_status == 409
    assert RemoteUnavailableError("down", "select").http_status == 503
    assert ConstraintViolationError("fk", "insert").http_status == 409
    assert RowNotFoundError("tasks", "t1", "delete tasks").http_status == 404
    assert StaleRevisionError("projects", "p1", {}).http_status == 409
    assert UnknownColumnError("projects", "rank", "select").http_status == 500


def test_resource_not_found_fills_context():
    exc = ResourceNotFoundError("Project", "p1")
    assert exc.context.entity_type == "project"
    assert exc.context.entity_id == "p1"
    assert exc.category == ErrorCategory.RESOURCE_NOT_FOUND


def test_gateway_error_records_operation():
    exc = RemoteUnavailableError("Connection refused", "select projects")
    assert exc.operation == "select projects"
    assert exc.context.operation == "select projects"
    assert exc.severity == ErrorSeverity.CRITICAL


def test_stale_revision_has_user_facing_message():
    exc = StaleRevisionError("projects", "p1", {"milestones_revision": 1})
    assert "Reload" in exc.user_message
    assert exc.guard == {"milestones_revision": 1}
    assert exc.severity == ErrorSeverity.WARNING


def test_to_response_envelope():
    body = ResourceNotFoundError("Task", "t9").to_response()
    error = body["error"]
    assert error["code"] == "RESOURCE_NOT_FOUND"
    assert error["message"] == "Task 't9' not found"
    assert error["category"] == "resource_not_found"
    assert error["context"]["entity_id"] == "t9"
    assert "timestamp" in error
