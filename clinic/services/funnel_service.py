# services/funnel_service.py
from clinic import logger
from ..constants import FUNNEL_STAGES, FUNNEL_STAGE_IDS
from ..errors import ActionConflict
from ..utils.helpers import format_brl


def funnel_board(deals, clients):
    """Deals grouped under the ordered pipeline stages"""
    names = {c.get('id'): c.get('name') for c in clients}
    board = []
    for stage in FUNNEL_STAGES:
        stage_deals = [
            dict(deal, client_name=names.get(deal.get('client_id'), 'Cliente Desconhecido'))
            for deal in deals if deal.get('stage_id') == stage['id']
        ]
        board.append(dict(
            stage,
            deals=stage_deals,
            count=len(stage_deals),
            total_value=sum(float(d.get('value') or 0) for d in stage_deals)
        ))
    return board


def funnel_summary(deals):
    total = sum(float(d.get('value') or 0) for d in deals)
    return f"Funil com {len(deals)} oportunidades. Valor total: R$ {format_brl(total)}."


class FunnelService:

    @staticmethod
    def move_deal(state, deal_id, stage_id):
        if stage_id not in FUNNEL_STAGE_IDS:
            raise ActionConflict(f"Unknown funnel stage: {stage_id}")
        deal = state.deals.require(deal_id)
        previous = deal.get('stage_id')
        deal['stage_id'] = stage_id
        saved = state.deals.save(deal)
        logger.info(f"Deal {deal_id} moved from {previous} to {stage_id}")
        return saved
