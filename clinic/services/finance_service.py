# services/finance_service.py
FINANCE_TABS = ('flow', 'payable', 'receivable')


def transactions_for_tab(transactions, tab):
    """``flow`` lists everything, ``payable`` expenses and ``receivable`` income"""
    if tab == 'payable':
        return [t for t in transactions if t.get('type') == 'EXPENSE']
    if tab == 'receivable':
        return [t for t in transactions if t.get('type') == 'INCOME']
    return list(transactions)


def finance_stats(transactions, net_margin=None, average_ticket=None):
    """
    Income and expense totals come from the ledger. Net margin and average
    ticket are configuration inputs and stay ``None`` when not configured.
    """
    income = sum(float(t.get('value') or 0) for t in transactions if t.get('type') == 'INCOME')
    expenses = sum(float(t.get('value') or 0) for t in transactions if t.get('type') == 'EXPENSE')
    return {
        'income_total': income,
        'expense_total': expenses,
        'net_margin': net_margin,
        'average_ticket': average_ticket,
    }


def client_name(clients, client_id):
    for client in clients:
        if client.get('id') == client_id:
            return client.get('name')
    return 'Outros'
