"""Fixed vocabularies shared by schemas, services and views."""

CLIENT_STATUSES = ('LEAD', 'ACTIVE', 'INACTIVE')

LEAD_SOURCES = ('Instagram', 'Facebook', 'Google Ads', 'Website', 'Indicação', 'WhatsApp', 'Outros')

APPOINTMENT_STATUSES = ('SCHEDULED', 'CONFIRMED', 'CANCELED', 'COMPLETED')

TRANSACTION_TYPES = ('INCOME', 'EXPENSE')
TRANSACTION_STATUSES = ('PENDING', 'PAID')
PAYMENT_METHODS = ('PIX', 'CREDIT_CARD', 'DEBIT_CARD', 'CASH')

# Ordered pipeline phases a deal can occupy
FUNNEL_STAGES = (
    {'id': 'new', 'title': 'Novo Lead', 'color': 'bg-blue-500'},
    {'id': 'contact', 'title': 'Em Contato', 'color': 'bg-yellow-500'},
    {'id': 'consult', 'title': 'Avaliação Marcada', 'color': 'bg-orange-500'},
    {'id': 'proposal', 'title': 'Proposta Enviada', 'color': 'bg-purple-500'},
    {'id': 'closed', 'title': 'Fechado', 'color': 'bg-green-500'},
)
FUNNEL_STAGE_IDS = tuple(stage['id'] for stage in FUNNEL_STAGES)
DEAL_LABELS = ('Novo', 'Quente', 'Urgente', 'Fidelizado')

SUPPLIER_CATEGORIES = ('Toxinas', 'Preenchedores', 'Equipamentos', 'Descartáveis', 'Outros')

USER_ROLES = ('ADMIN', 'ATTENDANT', 'SALES', 'MARKETING', 'FINANCE')

DEFAULT_APPEARANCE = {'primary_color': '#be185d', 'secondary_color': '#1e1b4b'}

# Collection name -> (backend table, id prefix)
ENTITY_TABLES = {
    'clients': ('clients', 'c'),
    'appointments': ('appointments', 'a'),
    'transactions': ('transactions', 't'),
    'deals': ('deals', 'd'),
    'suppliers': ('suppliers', 's'),
    'packages': ('packages', 'pk'),
    'users': ('profiles', 'u'),
}

# Loaded together when a session starts
SESSION_COLLECTIONS = ('clients', 'appointments', 'transactions', 'deals')
