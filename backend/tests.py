from django.db import OperationalError
from django.test import TestCase
from rest_framework import status
from rest_framework.exceptions import NotFound, ValidationError
from backend.exceptions import (
    AlreadyExists,
    Forbidden,
    InvalidSelfFollow,
    InvalidState,
    custom_exception_handler,
)


class ExceptionHandlerTests(TestCase):

    def handle(self, exc):
        return custom_exception_handler(exc, {"view": None})

    def test_detail_renamed_to_message(self):
        """Error bodies carry `message` and `type` instead of `detail`."""
        response = self.handle(NotFound("Post not found."))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["message"], "Post not found.")
        self.assertEqual(response.data["type"], "error")
        self.assertNotIn("detail", response.data)

    def test_conflicts_map_to_409(self):
        self.assertEqual(self.handle(AlreadyExists()).status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(self.handle(InvalidState()).status_code, status.HTTP_409_CONFLICT)

    def test_forbidden_maps_to_403(self):
        response = self.handle(Forbidden())
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["type"], "error")

    def test_self_follow_is_a_400_with_message(self):
        response = self.handle(InvalidSelfFollow())
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["message"], "You cannot follow yourself.")

    def test_field_errors_are_kept(self):
        response = self.handle(ValidationError({"decision": ["Invalid."]}))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["decision"], ["Invalid."])
        self.assertEqual(response.data["type"], "error")

    def test_operational_error_becomes_503(self):
        """A locked or unreachable database surfaces as retryable Unavailable."""
        response = self.handle(OperationalError("database is locked"))
        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data["type"], "error")

    def test_unhandled_exception_passes_through(self):
        self.assertIsNone(self.handle(KeyError("boom")))
