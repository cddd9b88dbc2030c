# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from parkingslot.application.use_cases.carparks.create_carpark import CreateCarparkUseCase
from parkingslot.application.use_cases.carparks.delete_carpark import DeleteCarparkUseCase
from parkingslot.application.use_cases.carparks.get_carpark import GetCarparkUseCase
from parkingslot.application.use_cases.carparks.list_carparks import ListCarparksUseCase
from parkingslot.domain.pagination import DEFAULT_PAGE_SIZE
from parkingslot.domain.users.entities import Role
from parkingslot.infrastructure.audit import AuditAction, audit_log
from parkingslot.infrastructure.auth_middleware import BearerAuthenticator, current_principal
from parkingslot.interfaces.http.dto.carparks import CarparkDTO, CreateCarparkRequestDTO
from parkingslot.interfaces.http.pagination import paged_response, parse_page_query
from parkingslot.shared.errors.validation import raise_validation_error


class CarparksController:
    def __init__(
        self,
        *,
        authenticator: BearerAuthenticator,
        list_use_case: ListCarparksUseCase,
        get_use_case: GetCarparkUseCase,
        create_use_case: CreateCarparkUseCase,
        delete_use_case: DeleteCarparkUseCase,
        default_page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._auth = authenticator
        self._list_use_case = list_use_case
        self._get_use_case = get_use_case
        self._create_use_case = create_use_case
        self._delete_use_case = delete_use_case
        self._default_page_size = default_page_size

    def list_carparks(self) -> tuple[Response, int]:
        page = self._list_use_case.execute(parse_page_query(self._default_page_size))
        response = paged_response(
            page,
            "carparks.list_carparks",
            lambda carpark: CarparkDTO.from_entity(carpark).to_json(),
        )
        return response, 200

    def get_carpark(self, carpark_id: str) -> tuple[Response, int]:
        carpark = self._get_use_case.execute(carpark_id)
        return jsonify(CarparkDTO.from_entity(carpark).to_json()), 200

    def create_carpark(self) -> tuple[Response, int]:
        try:
            dto = CreateCarparkRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        carpark = self._create_use_case.execute(dto.to_new_carpark())
        audit_log(
            AuditAction.CARPARK_CREATED,
            user_id=current_principal().user_id,
            ip_address=request.remote_addr,
            details={"carpark_id": carpark.carpark_id},
        )
        return jsonify(CarparkDTO.from_entity(carpark).to_json()), 200

    def delete_carpark(self, carpark_id: str) -> tuple[str, int]:
        self._delete_use_case.execute(carpark_id)
        audit_log(
            AuditAction.CARPARK_DELETED,
            user_id=current_principal().user_id,
            ip_address=request.remote_addr,
            details={"id": carpark_id},
        )
        return "", 204

    def as_blueprint(self) -> Blueprint:
        admin_only = self._auth.require_role(Role.ADMIN)
        bp = Blueprint("carparks", __name__, url_prefix="/api/carparks")
        bp.add_url_rule("", view_func=self.list_carparks, methods=["GET"])
        bp.add_url_rule("", view_func=admin_only(self.create_carpark), methods=["POST"])
        bp.add_url_rule("/<carpark_id>", view_func=self.get_carpark, methods=["GET"])
        bp.add_url_rule(
            "/<carpark_id>", view_func=admin_only(self.delete_carpark), methods=["DELETE"]
        )
        return bp
