# ==============================================================================
# VALIDAÇÕES DE CAMPOS
# ==============================================================================
# Regras de formato usadas pelos serviços antes de qualquer mutação.
# A máscara de digitação fica na interface; aqui só se confere o resultado.
# ==============================================================================

import re
from typing import Any, Optional, Tuple
from urllib.parse import urlparse

from techservice.exceptions import ValidationError

CPF_PATTERN = re.compile(r'^\d{3}\.\d{3}\.\d{3}-\d{2}$')
CNPJ_PATTERN = re.compile(r'^\d{2}\.\d{3}\.\d{3}/\d{4}-\d{2}$')


def require(value: Any, message: str) -> str:
    """Retorna o texto sem espaços extras ou levanta ValidationError se vazio."""
    text = str(value).strip() if value is not None else ''
    if not text:
        raise ValidationError(message)
    return text


def exclusive_documents(cpf: Optional[str], cnpj: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Aplica a exclusividade CPF/CNPJ.

    Se os dois forem enviados, o CNPJ prevalece e o CPF é descartado.

    Returns:
        Tupla (cpf, cnpj) com no máximo um preenchido
    """
    cpf = str(cpf or '').strip() or None
    cnpj = str(cnpj or '').strip() or None
    if cnpj:
        return None, cnpj
    return cpf, None


def validate_cpf(cpf: Optional[str]) -> None:
    """CPF incompleto ou fora da máscara NNN.NNN.NNN-NN."""
    if cpf and not CPF_PATTERN.match(cpf):
        raise ValidationError('CPF incompleto ou inválido.')


def validate_cnpj(cnpj: Optional[str]) -> None:
    """CNPJ incompleto ou fora da máscara NN.NNN.NNN/NNNN-NN."""
    if cnpj and not CNPJ_PATTERN.match(cnpj):
        raise ValidationError('CNPJ incompleto ou inválido.')


def validate_url(url: Any) -> str:
    """
    Confere o link de emissão de NFS-e.

    Returns:
        URL sem espaços nas pontas

    Raises:
        ValidationError: vazio ou sem esquema/host
    """
    url = require(url, 'O link da NFS-e não pode estar vazio.')
    parsed = urlparse(url)
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise ValidationError('Insira uma URL válida (ex: https://...).')
    return url
