from typing import Dict, List
from dataclasses import dataclass

from ..models import FileRole, LayoutTag, SourceFile
from ..utils.normalization import normalize_identifier, normalize_name
from .layouts import detect_layout, get_layout, lookup
from .master import NAME_COLUMN, REPRESENTATIVE_COLUMN, TAX_ID_COLUMN

@dataclass
class ValidationError:
    row_number: int
    field: str
    message: str
    severity: str  # 'CRITICAL', 'WARNING', 'INFO'

class SourceFileValidator:
    """Checks a loaded file before it enters a reconciliation run."""

    def __init__(self, source: SourceFile):
        self.source = source
        self.errors: List[ValidationError] = []
        self.stats = {
            'total_rows': len(source.rows),
            'valid_rows': 0,
            'rows_with_warnings': 0,
            'rows_with_errors': 0
        }

    def _add(self, row_number: int, field: str, message: str, severity: str) -> None:
        self.errors.append(ValidationError(
            row_number=row_number,
            field=field,
            message=message,
            severity=severity
        ))

    def validate_file_structure(self) -> bool:
        """Validates that the file has rows and the columns its role needs."""
        if not self.source.rows:
            self._add(0, 'FILE', 'File has no data rows', 'CRITICAL')
            return False

        if self.source.role is FileRole.MASTER:
            self._check_master_columns()
            name_field, tax_field = NAME_COLUMN, TAX_ID_COLUMN
        else:
            layout = self.source.layout or detect_layout(self.source.columns)
            if layout is LayoutTag.GENERIC:
                self._add(0, 'HEADERS', 'No known layout detected, generic mapping will be used', 'INFO')
            spec = get_layout(layout)
            name_field = spec.fields['client_name'].labels[0]
            tax_field = spec.fields['tax_id'].labels[0]

        for row_num, row in enumerate(self.source.rows, start=1):
            name = normalize_name(lookup(row, name_field))
            tax_id = normalize_identifier(lookup(row, tax_field))
            if not name and not tax_id:
                self._add(row_num, name_field, 'Row has neither name nor CPF and cannot be matched', 'WARNING')
                self.stats['rows_with_warnings'] += 1
            else:
                self.stats['valid_rows'] += 1

        return len([e for e in self.errors if e.severity == 'CRITICAL']) == 0

    def _check_master_columns(self) -> None:
        folded = {c.casefold() for c in self.source.columns}
        for column in (REPRESENTATIVE_COLUMN, NAME_COLUMN, TAX_ID_COLUMN):
            if column.casefold() not in folded:
                self._add(0, 'HEADERS', f'Missing master column: {column}', 'WARNING')

    def get_validation_summary(self) -> Dict:
        """Returns a summary of the validation results."""
        return {
            'stats': self.stats,
            'errors': [
                {
                    'row': e.row_number,
                    'field': e.field,
                    'message': e.message,
                    'severity': e.severity
                }
                for e in self.errors
            ]
        }

def validate_source_file(source: SourceFile) -> Dict:
    """Main entry point for file validation."""
    validator = SourceFileValidator(source)
    is_valid = validator.validate_file_structure()

    return {
        'is_valid': is_valid,
        'summary': validator.get_validation_summary()
    }

def require_rows(source: SourceFile) -> SourceFile:
    """Fail fast on a file that was loaded without any rows.

    Raises:
        ValueError: If the file has no rows
    """
    if not source.rows:
        raise ValueError(f"File '{source.name}' has no data rows")
    return source
