# services/supplier_service.py
from typing import List, Optional

from clinic import logger


class SupplierService:

    @staticmethod
    def search(state, term: Optional[str] = None, category: Optional[str] = None) -> List[dict]:
        """Name or contact-person substring plus an optional category filter"""
        if category == 'Todos':
            category = None
        return state.suppliers.filter(term, fields=('name', 'contact_person'), category=category)

    @staticmethod
    def save_supplier(state, data: dict) -> dict:
        """Create or fully replace a supplier"""
        logger.info(f"Saving supplier with data: {data}")
        try:
            supplier = state.suppliers.save(data)
            logger.info(f"Supplier saved successfully: {supplier['id']}")
            return supplier
        except Exception as e:
            logger.error(f"Error saving supplier: {str(e)}")
            raise

    @staticmethod
    def delete_supplier(state, supplier_id: str) -> None:
        state.suppliers.delete(supplier_id)
        logger.info(f"Supplier deleted: {supplier_id}")
