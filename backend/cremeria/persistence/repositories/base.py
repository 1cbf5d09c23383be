# =============================================================================
# CREMERIA v1.0 - BASE REPOSITORY
# =============================================================================
# Almacen de entidades generico: list / filter / get / create / bulk_create /
# update sobre una tabla descrita en persistence/tables.py
# =============================================================================

import json
import uuid
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ...database import locked, transaction
from ...exceptions import ValidationError
from ...utils.conversions import utc_now, to_decimal, parse_timestamp


# Campos asignados por el almacen, nunca por el llamador
READONLY_FIELDS = ('id', 'created_date')


class EntityRepository:
    """
    Repository generico con la interfaz del almacen de entidades.

    Attributes:
        table_name: Nombre de la tabla
        columns: Mapa columna -> tipo logico (text, int, decimal, bool, json, timestamp)
        default_sort: Orden aplicado cuando el llamador no indica uno
    """

    def __init__(self, table_name: str, columns: Dict[str, str], default_sort: str = '-created_date'):
        self.table_name = table_name
        self.columns = columns
        self.default_sort = default_sort

    def _fetchone(self, query: str, params: tuple = ()):
        with locked() as db:
            return db.execute(query, params).fetchone()

    def _fetchall(self, query: str, params: tuple = ()):
        with locked() as db:
            return db.execute(query, params).fetchall()

    # -------------------------------------------------------------------------
    # Lectura
    # -------------------------------------------------------------------------

    def get_by_id(self, id_value: str) -> Optional[Dict[str, Any]]:
        """
        Recupera un registro por ID.

        Returns:
            Dict con el registro o None
        """
        if not id_value:
            return None
        row = self._fetchone(
            f"SELECT * FROM {self.table_name} WHERE id = ?",
            (id_value,)
        )
        return self._decode(row) if row else None

    def list(self, sort: str = None, limit: int = None) -> List[Dict[str, Any]]:
        """Todos los registros con orden opcional ('campo' o '-campo')."""
        return self.filter({}, sort=sort, limit=limit)

    def filter(
        self,
        predicate: Dict[str, Any],
        sort: str = None,
        limit: int = None
    ) -> List[Dict[str, Any]]:
        """
        Registros que cumplen el predicado.

        Args:
            predicate: {campo: valor} por igualdad; None = IS NULL;
                       {'$ne': v} distinto; {'$in': [...]} inclusion
            sort: 'campo' ascendente, '-campo' descendente
            limit: maximo de registros

        Returns:
            Lista de dict decodificados
        """
        where, params = self._compile_predicate(predicate)
        query = f"SELECT * FROM {self.table_name}"
        if where:
            query += f" WHERE {where}"
        query += f" ORDER BY {self._compile_sort(sort or self.default_sort)}"
        if limit:
            query += " LIMIT ?"
            params.append(int(limit))

        rows = self._fetchall(query, tuple(params))
        return [self._decode(row) for row in rows]

    def count(self, predicate: Dict[str, Any] = None) -> int:
        """Conteo de registros con predicado opcional."""
        where, params = self._compile_predicate(predicate or {})
        query = f"SELECT COUNT(*) AS cnt FROM {self.table_name}"
        if where:
            query += f" WHERE {where}"
        row = self._fetchone(query, tuple(params))
        return row['cnt'] if row else 0

    # -------------------------------------------------------------------------
    # Escritura
    # -------------------------------------------------------------------------

    def create(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Inserta un registro asignando id y created_date.

        Returns:
            Registro creado (decodificado)
        """
        columns, values = self._prepare_insert(record)
        with transaction() as db:
            db.execute(self._insert_sql(columns), values)
            return self.get_by_id(values[0])

    def bulk_create(self, records: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Inserta varios registros en una sola sentencia executemany.

        Todos los registros deben compartir las mismas columnas.
        """
        records = list(records)
        if not records:
            return []

        all_fields = sorted({field for record in records for field in record})
        prepared = [self._prepare_insert({f: r.get(f) for f in all_fields}) for r in records]
        columns = prepared[0][0]

        ids = [values[0] for _, values in prepared]
        with transaction() as db:
            db.executemany(self._insert_sql(columns), [values for _, values in prepared])
            created = {r['id']: r for r in self.filter({'id': {'$in': ids}})}
        return [created[id_value] for id_value in ids if id_value in created]

    def update(self, id_value: str, partial: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Actualiza solo los campos indicados.

        id y created_date son inmutables y se ignoran.

        Returns:
            Registro actualizado o None si no existe
        """
        changes = {k: v for k, v in partial.items() if k not in READONLY_FIELDS}
        self._check_fields(changes)
        if not changes:
            return self.get_by_id(id_value)

        set_clause = ', '.join(f"{field} = ?" for field in changes)
        params = [self._encode(field, value) for field, value in changes.items()]
        params.append(id_value)

        with transaction() as db:
            cursor = db.execute(
                f"UPDATE {self.table_name} SET {set_clause} WHERE id = ?",
                tuple(params)
            )
            if cursor.rowcount == 0:
                return None
            return self.get_by_id(id_value)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _check_fields(self, fields: Iterable[str]) -> None:
        unknown = [f for f in fields if f not in self.columns]
        if unknown:
            raise ValidationError(
                f"Campos desconocidos para {self.table_name}: {', '.join(sorted(unknown))}"
            )

    def _prepare_insert(self, record: Dict[str, Any]) -> Tuple[List[str], tuple]:
        data = {k: v for k, v in record.items() if k not in READONLY_FIELDS}
        self._check_fields(data)
        data = {'id': uuid.uuid4().hex, 'created_date': utc_now(), **data}
        columns = list(data.keys())
        return columns, tuple(self._encode(c, data[c]) for c in columns)

    def _insert_sql(self, columns: List[str]) -> str:
        placeholders = ', '.join('?' for _ in columns)
        return f"INSERT INTO {self.table_name} ({', '.join(columns)}) VALUES ({placeholders})"

    def _compile_predicate(self, predicate: Dict[str, Any]) -> Tuple[str, list]:
        self._check_fields(predicate)
        clauses = []
        params = []
        for field, condition in predicate.items():
            if isinstance(condition, dict):
                for operator, value in condition.items():
                    if operator == '$ne':
                        if value is None:
                            clauses.append(f"{field} IS NOT NULL")
                        else:
                            clauses.append(f"({field} <> ? OR {field} IS NULL)")
                            params.append(self._encode(field, value))
                    elif operator == '$in':
                        values = list(value)
                        if not values:
                            clauses.append("1 = 0")
                        else:
                            clauses.append(f"{field} IN ({', '.join('?' for _ in values)})")
                            params.extend(self._encode(field, v) for v in values)
                    else:
                        raise ValidationError(f"Operador no soportado: {operator}")
            elif condition is None:
                clauses.append(f"{field} IS NULL")
            else:
                clauses.append(f"{field} = ?")
                params.append(self._encode(field, condition))
        return ' AND '.join(clauses), params

    def _compile_sort(self, sort: str) -> str:
        direction = 'DESC' if sort.startswith('-') else 'ASC'
        field = sort.lstrip('-')
        self._check_fields([field])
        # id como desempate estable
        return f"{field} {direction}, id {direction}"

    def _encode(self, field: str, value: Any) -> Any:
        if value is None:
            return None
        kind = self.columns[field]
        if kind == 'json':
            return json.dumps(value, default=str)
        if kind == 'timestamp':
            return parse_timestamp(value).isoformat(timespec='microseconds')
        if kind == 'bool':
            return bool(value)
        if kind == 'decimal':
            return to_decimal(value)
        if kind == 'int':
            return int(value)
        if hasattr(value, 'value'):
            # Enum str
            return value.value
        return value

    def _decode(self, row) -> Dict[str, Any]:
        record = dict(row)
        for field, kind in self.columns.items():
            value = record.get(field)
            if value is None:
                continue
            if kind == 'json':
                record[field] = json.loads(value) if isinstance(value, str) else value
            elif kind == 'timestamp':
                record[field] = parse_timestamp(value)
            elif kind == 'bool':
                record[field] = bool(value)
            elif kind == 'decimal':
                record[field] = to_decimal(value)
        return record
