import logging
from datetime import date
from typing import Any, Iterable, Mapping

from src.application.ports.draft_store_port import DraftStorePort
from src.application.ports.session_store_port import SessionStorePort
from src.domain.errors import BadRequestError
from src.domain.row_validation import evaluate_row, summarize_rows

logger = logging.getLogger(__name__)


class EvaluateRowsUseCase:
    """대시보드 행의 날짜 검증 / 상태 산출을 수행하고 draft 로 저장하는 Use Case"""

    def __init__(self, draft_store: DraftStorePort, session_store: SessionStorePort):
        self.draft_store = draft_store
        self.session_store = session_store

    def execute(
        self,
        session_id: str | None,
        rows: Iterable[Mapping[str, Any]],
        today: date | None = None,
    ) -> dict:
        """
        Args:
            session_id: draft 저장 키. 유효한 로그인 세션이 아니면 저장하지 않음
            rows: [{"key": 이슈 키, "values": {컬럼명: 값}}, ...]
            today: 기준일. None이면 오늘

        Returns:
            {"rows": [행별 결과], "banner": {"visible", "messages", "text"}}
        """
        today = today or date.today()

        evaluations = []
        for row in rows:
            key = str(row.get("key") or "").strip()
            if not key:
                raise BadRequestError("Each row needs a ticket key.")
            evaluations.append(evaluate_row(key, row.get("values") or {}, today))

        # 모든 행 평가가 끝난 뒤에만 저장
        if session_id and self.session_store.get(session_id) is not None:
            for evaluation in evaluations:
                self.draft_store.save(session_id, evaluation.key, evaluation.values)
        elif session_id:
            logger.info("로그인 세션 없음 → draft 저장 생략")

        banner = summarize_rows(evaluations)
        logger.info(
            "행 평가 완료: %d행, 오류 %d건 (기준일 %s)",
            len(evaluations), len(banner.messages), today.isoformat(),
        )

        return {
            "rows": [ev.to_dict() for ev in evaluations],
            "banner": {
                "visible": banner.visible,
                "messages": list(banner.messages),
                "text": banner.text,
            },
        }
