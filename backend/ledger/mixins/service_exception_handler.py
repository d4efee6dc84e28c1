"""
Service exception handler mixin.

Translates service layer exceptions into DRF exceptions with structured
logging, so views stay free of try/except blocks.
"""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.exceptions import APIException, NotFound
from rest_framework.exceptions import PermissionDenied as DRFPermissionDenied
from rest_framework.exceptions import ValidationError as DRFValidationError

from ..exceptions import EntityNotFoundError

logger = logging.getLogger(__name__)


def _service_name(service_call, fallback):
    owner = getattr(service_call, "__self__", None)
    if owner is not None:
        return owner.__class__.__name__
    qualname = getattr(service_call, "__qualname__", "")
    if "." in qualname:
        return qualname.split(".")[0]
    return fallback.__class__.__name__


class ServiceExceptionHandlerMixin:
    """
    Mixin for views calling the ledger services.

    Mapping:
    - Django ValidationError -> DRF ValidationError (400)
    - PermissionError (UnauthorizedError included) -> DRF PermissionDenied (403)
    - EntityNotFoundError -> DRF NotFound (404)
    - DRF exceptions pass through unchanged
    - anything else -> APIException (500), logged with stack trace

    Usage:
        expense = self.handle_service_call(
            LedgerService.create_expense, request.user.id, account_id, ...
        )
    """

    def handle_service_call(self, service_call, *args, **kwargs):
        """
        Execute a service call and translate its exceptions.

        Args:
            service_call: Service method to execute
            *args: Positional arguments for service call
            **kwargs: Keyword arguments for service call

        Returns:
            Any: Result from service call

        Raises:
            DRFValidationError: For business rule violations
            DRFPermissionDenied: For authorization failures
            NotFound: For missing entities
            APIException: For unexpected service errors
        """
        service_name = _service_name(service_call, self)
        method_name = getattr(service_call, "__name__", str(service_call))
        request = getattr(self, "request", None)
        user_id = getattr(getattr(request, "user", None), "id", None) if request else None

        logger.debug(
            "Service call execution initiated",
            extra={
                "service_name": service_name,
                "method_name": method_name,
                "user_id": user_id,
                "args_count": len(args),
                "kwargs_keys": list(kwargs.keys()),
                "action": "service_call_start",
                "component": "ServiceExceptionHandlerMixin",
            },
        )

        try:
            result = service_call(*args, **kwargs)

            logger.debug(
                "Service call completed successfully",
                extra={
                    "service_name": service_name,
                    "method_name": method_name,
                    "user_id": user_id,
                    "result_type": type(result).__name__,
                    "action": "service_call_success",
                    "component": "ServiceExceptionHandlerMixin",
                },
            )

            return result

        except (DRFValidationError, DRFPermissionDenied, NotFound) as e:
            logger.warning(
                "Service raised DRF exception",
                extra={
                    "service_name": service_name,
                    "method_name": method_name,
                    "user_id": user_id,
                    "error_type": type(e).__name__,
                    "error_detail": e.detail,
                    "action": "service_drf_exception",
                    "component": "ServiceExceptionHandlerMixin",
                    "severity": "medium",
                },
            )
            raise

        except DjangoValidationError as e:
            # Keep field errors keyed by field when the service raised a dict
            if hasattr(e, "error_dict"):
                detail = e.message_dict
            else:
                detail = e.messages

            logger.warning(
                "Service validation error (Django)",
                extra={
                    "service_name": service_name,
                    "method_name": method_name,
                    "user_id": user_id,
                    "error_type": "DjangoValidationError",
                    "error_messages": e.messages,
                    "action": "service_validation_error_django",
                    "component": "ServiceExceptionHandlerMixin",
                    "severity": "medium",
                },
            )

            raise DRFValidationError(detail)

        except PermissionError as e:
            logger.warning(
                "Service permission denied",
                extra={
                    "service_name": service_name,
                    "method_name": method_name,
                    "user_id": user_id,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "account_ids": getattr(e, "account_ids", None),
                    "action": "service_permission_denied",
                    "component": "ServiceExceptionHandlerMixin",
                    "severity": "high",
                },
            )

            raise DRFPermissionDenied(str(e))

        except EntityNotFoundError as e:
            logger.info(
                "Service entity not found",
                extra={
                    "service_name": service_name,
                    "method_name": method_name,
                    "user_id": user_id,
                    "entity": e.entity,
                    "entity_id": e.entity_id,
                    "action": "service_entity_not_found",
                    "component": "ServiceExceptionHandlerMixin",
                },
            )

            raise NotFound(str(e))

        except APIException as e:
            logger.error(
                "Service API exception",
                extra={
                    "service_name": service_name,
                    "method_name": method_name,
                    "user_id": user_id,
                    "error_type": "APIException",
                    "error_detail": e.detail,
                    "status_code": e.status_code,
                    "action": "service_api_exception",
                    "component": "ServiceExceptionHandlerMixin",
                    "severity": "high",
                },
            )
            raise

        except Exception as e:
            logger.error(
                "Service operation failed unexpectedly",
                extra={
                    "service_name": service_name,
                    "method_name": method_name,
                    "user_id": user_id,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "args_count": len(args),
                    "kwargs_keys": list(kwargs.keys()),
                    "action": "service_unexpected_error",
                    "component": "ServiceExceptionHandlerMixin",
                    "severity": "critical",
                },
                exc_info=True,  # Include full stack trace
            )

            # Generic message, internals stay in the log
            raise APIException(detail="Service operation failed", code="service_error")
