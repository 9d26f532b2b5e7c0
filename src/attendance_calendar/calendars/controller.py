from __future__ import annotations

import logging
from typing import Any, Optional

from flask import Flask, jsonify, request

from ..container import Container
from ..core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError
from .mapper import calendar_from_dict, calendar_to_dict, day_entry_from_dict

logger = logging.getLogger(__name__)

PREFIX = "/api/calendar"


def register(app: Flask, container: Container) -> None:
    service = container.calendar_service

    def _error(e: DomainError, status: int):
        logger.warning("%s %s -> %d: %s", request.method, request.path, status, e)
        return jsonify({"success": False, "message": str(e)}), status

    app.register_error_handler(ValidationError, lambda e: _error(e, 400))
    app.register_error_handler(NotFoundError, lambda e: _error(e, 404))
    app.register_error_handler(ConflictError, lambda e: _error(e, 409))

    def _json_body() -> Any:
        body = request.get_json(silent=True)
        if body is None:
            raise ValidationError("Request body must be JSON")
        return body

    def _json_object() -> dict:
        body = _json_body()
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")
        return body

    def _day_map(body: Any) -> dict[int, Any]:
        if not isinstance(body, dict):
            raise ValidationError("Body must be an object of day -> value")
        try:
            return {int(k): v for k, v in body.items()}
        except (TypeError, ValueError) as e:
            raise ValidationError("Day keys must be integers") from e

    def _calendar_list(calendars) -> Any:
        return jsonify([calendar_to_dict(c) for c in calendars])

    def _updated_by(body: dict) -> Optional[str]:
        value = body.get("updated_by")
        return str(value) if value else None

    # ===== Calendar CRUD =====

    @app.route(f"{PREFIX}/all", methods=["GET"], endpoint="calendar_all")
    def calendar_all():
        return _calendar_list(service.get_all_calendars())

    @app.route(f"{PREFIX}/<year>/<month>", methods=["GET"], endpoint="calendar_get")
    def calendar_get(year: str, month: str):
        calendar = service.get_calendar(year, month)
        if calendar is None:
            raise NotFoundError(f"Calendar not found for {year}-{month}")
        return jsonify(calendar_to_dict(calendar))

    @app.route(f"{PREFIX}/<year>/<month>/or-create", methods=["GET"], endpoint="calendar_get_or_create")
    def calendar_get_or_create(year: str, month: str):
        region = request.args.get("region")
        return jsonify(calendar_to_dict(service.get_or_create_calendar(year, month, region)))

    @app.route(PREFIX, methods=["POST"], endpoint="calendar_create")
    def calendar_create():
        calendar = calendar_from_dict(_json_body())
        return jsonify(calendar_to_dict(service.create_calendar(calendar))), 201

    @app.route(f"{PREFIX}/<year>/<month>", methods=["PUT"], endpoint="calendar_update")
    def calendar_update(year: str, month: str):
        calendar = calendar_from_dict(_json_body())
        return jsonify(calendar_to_dict(service.update_calendar(year, month, calendar)))

    @app.route(f"{PREFIX}/<year>/<month>", methods=["DELETE"], endpoint="calendar_delete")
    def calendar_delete(year: str, month: str):
        service.delete_calendar(year, month)
        return "", 204

    @app.route(f"{PREFIX}/generate/<year>/<month>", methods=["POST"], endpoint="calendar_generate")
    def calendar_generate(year: str, month: str):
        body = request.get_json(silent=True) or {}
        holidays = body.get("holidays") if isinstance(body, dict) else None
        if holidays is not None and not isinstance(holidays, list):
            raise ValidationError("'holidays' must be a list of day numbers")
        return jsonify(calendar_to_dict(service.generate_calendar(year, month, holidays))), 201

    # ===== Day-level =====

    @app.route(f"{PREFIX}/<year>/<month>/day/<int:day>/status", methods=["GET"], endpoint="day_status_get")
    def day_status_get(year: str, month: str, day: int):
        return jsonify(service.get_day_status(year, month, day))

    @app.route(f"{PREFIX}/<year>/<month>/day/<int:day>/type", methods=["PUT"], endpoint="day_type_update")
    def day_type_update(year: str, month: str, day: int):
        body = _json_object()
        calendar = service.update_day_type(year, month, day, body.get("type"), updated_by=_updated_by(body))
        return jsonify(calendar_to_dict(calendar))

    @app.route(f"{PREFIX}/<year>/<month>/day/<int:day>/status", methods=["PUT"], endpoint="day_status_update")
    def day_status_update(year: str, month: str, day: int):
        body = _json_object()
        calendar = service.update_day_status(
            year,
            month,
            day,
            type=body.get("type"),
            attendance=body.get("attendance"),
            description=body.get("description"),
            updated_by=_updated_by(body),
        )
        return jsonify(calendar_to_dict(calendar))

    @app.route(f"{PREFIX}/<year>/<month>/day/<int:day>/attendance", methods=["PUT"], endpoint="day_attendance_update")
    def day_attendance_update(year: str, month: str, day: int):
        body = _json_object()
        calendar = service.update_attendance(year, month, day, body.get("attendance"), updated_by=_updated_by(body))
        return jsonify(calendar_to_dict(calendar))

    @app.route(f"{PREFIX}/<year>/<month>/day/<int:day>/attendance", methods=["DELETE"], endpoint="day_attendance_clear")
    def day_attendance_clear(year: str, month: str, day: int):
        return jsonify(calendar_to_dict(service.clear_attendance(year, month, day)))

    @app.route(f"{PREFIX}/<year>/<month>/day", methods=["POST"], endpoint="day_entry_add")
    def day_entry_add(year: str, month: str):
        entry = day_entry_from_dict(_json_body())
        return jsonify(calendar_to_dict(service.add_day_entry(year, month, entry)))

    # ===== Bulk =====

    def _bulk_response(result):
        return jsonify(
            {
                "calendar": calendar_to_dict(result.calendar),
                "applied": result.applied,
                "skipped": {str(k): v for k, v in result.skipped.items()},
            }
        )

    @app.route(f"{PREFIX}/<year>/<month>/bulk-attendance", methods=["PUT"], endpoint="bulk_attendance")
    def bulk_attendance(year: str, month: str):
        result = service.bulk_update_attendance(year, month, _day_map(_json_body()))
        return _bulk_response(result)

    @app.route(f"{PREFIX}/<year>/<month>/bulk-day-types", methods=["PUT"], endpoint="bulk_day_types")
    def bulk_day_types(year: str, month: str):
        result = service.bulk_update_day_types(year, month, _day_map(_json_body()))
        return _bulk_response(result)

    # ===== Statistics =====

    @app.route(f"{PREFIX}/<year>/<month>/stats", methods=["GET"], endpoint="calendar_stats")
    def calendar_stats(year: str, month: str):
        return jsonify(service.get_calendar_statistics(year, month))

    @app.route(f"{PREFIX}/stats/overall", methods=["GET"], endpoint="stats_overall")
    def stats_overall():
        return jsonify(service.get_overall_statistics())

    @app.route(f"{PREFIX}/stats/year/<year>", methods=["GET"], endpoint="stats_yearly")
    def stats_yearly(year: str):
        return jsonify(service.get_yearly_statistics(year))

    @app.route(f"{PREFIX}/stats/days", methods=["GET"], endpoint="stats_days")
    def stats_days():
        return jsonify(service.get_day_counts())

    # ===== Queries =====

    @app.route(f"{PREFIX}/year/<year>", methods=["GET"], endpoint="calendars_by_year")
    def calendars_by_year(year: str):
        return _calendar_list(service.get_calendars_by_year(year))

    @app.route(f"{PREFIX}/holidays", methods=["GET"], endpoint="calendars_with_holidays")
    def calendars_with_holidays():
        return _calendar_list(service.get_calendars_with_holidays())

    @app.route(f"{PREFIX}/weekends", methods=["GET"], endpoint="calendars_with_weekends")
    def calendars_with_weekends():
        return _calendar_list(service.get_calendars_with_weekends())

    @app.route(f"{PREFIX}/working-days", methods=["GET"], endpoint="calendars_with_working_days")
    def calendars_with_working_days():
        return _calendar_list(service.get_calendars_with_working_days())

    @app.route(f"{PREFIX}/attendance", methods=["GET"], endpoint="calendars_with_attendance")
    def calendars_with_attendance():
        return _calendar_list(service.get_calendars_with_attendance())

    @app.route(f"{PREFIX}/attendance/office", methods=["GET"], endpoint="calendars_with_office")
    def calendars_with_office():
        return _calendar_list(service.get_calendars_with_office_attendance())

    @app.route(f"{PREFIX}/attendance/wfh", methods=["GET"], endpoint="calendars_with_wfh")
    def calendars_with_wfh():
        return _calendar_list(service.get_calendars_with_wfh_attendance())

    @app.route(f"{PREFIX}/attendance/mixed", methods=["GET"], endpoint="calendars_with_mixed")
    def calendars_with_mixed():
        return _calendar_list(service.get_calendars_with_mixed_attendance())

    @app.route(f"{PREFIX}/attendance/incomplete", methods=["GET"], endpoint="calendars_incomplete")
    def calendars_incomplete():
        return _calendar_list(service.get_calendars_with_incomplete_attendance())

    @app.route(f"{PREFIX}/attendance/full", methods=["GET"], endpoint="calendars_full")
    def calendars_full():
        return _calendar_list(service.get_calendars_with_full_attendance())

    @app.route(f"{PREFIX}/attendance/rate", methods=["GET"], endpoint="calendars_by_rate")
    def calendars_by_rate():
        try:
            threshold = float(request.args.get("min", "0"))
        except ValueError as e:
            raise ValidationError("'min' must be a number") from e
        return _calendar_list(service.get_calendars_with_attendance_rate_at_least(threshold))

    @app.route(f"{PREFIX}/range", methods=["GET"], endpoint="calendars_by_range")
    def calendars_by_range():
        args = request.args
        calendars = service.get_calendars_by_date_range(
            args.get("start_year"),
            args.get("start_month"),
            args.get("end_year"),
            args.get("end_month"),
        )
        return _calendar_list(calendars)

    @app.route(f"{PREFIX}/latest", methods=["GET"], endpoint="calendar_latest")
    def calendar_latest():
        calendar = service.get_latest_calendar()
        if calendar is None:
            raise NotFoundError("No calendars stored")
        return jsonify(calendar_to_dict(calendar))

    @app.route(f"{PREFIX}/oldest", methods=["GET"], endpoint="calendar_oldest")
    def calendar_oldest():
        calendar = service.get_oldest_calendar()
        if calendar is None:
            raise NotFoundError("No calendars stored")
        return jsonify(calendar_to_dict(calendar))

    @app.route(f"{PREFIX}/exists/<year>/<month>", methods=["GET"], endpoint="calendar_exists")
    def calendar_exists(year: str, month: str):
        return jsonify(service.calendar_exists(year, month))

    @app.route(f"{PREFIX}/count", methods=["GET"], endpoint="calendar_count")
    def calendar_count():
        return jsonify(service.get_total_calendars_count())

    @app.route(f"{PREFIX}/years", methods=["GET"], endpoint="calendar_years")
    def calendar_years():
        return jsonify(list(service.get_distinct_years()))

    @app.route(f"{PREFIX}/year/<year>/count", methods=["GET"], endpoint="calendar_count_by_year")
    def calendar_count_by_year(year: str):
        return jsonify(service.get_calendar_count_by_year(year))
