# app/domain/services/field_extractor.py
import logging
import re
from typing import Optional, Union

from lxml import etree

from app.domain.errors import MalformedDocument
from app.domain.models.fiscal_document import RawFields

logger = logging.getLogger(__name__)

# El texto ya está decodificado: la declaración (y su encoding) deja de aplicar
XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")

# Estructuras obligatorias: sin ellas el documento no se procesa
ROOT_TAG = "infNFe"
IDENTIFICATION_TAG = "ide"
ISSUER_TAG = "emit"
TOTALS_TAG = "total"
# Opcional: sin destinatario los campos quedan vacíos
RECIPIENT_TAG = "dest"


def _find(element, tag: str):
    """Busca el primer descendiente con ese nombre local, ignorando el namespace."""
    nodes = element.xpath(f".//*[local-name()='{tag}']")
    return nodes[0] if nodes else None


def _text(element, *tags: str) -> str:
    """Texto del primer tag presente dentro de `element`; cadena vacía si no hay ninguno."""
    if element is None:
        return ""
    for tag in tags:
        node = _find(element, tag)
        if node is not None and node.text is not None:
            return node.text.strip()
    return ""


def decode_payload(payload: Union[bytes, str]) -> str:
    if isinstance(payload, str):
        return payload
    try:
        return payload.decode('utf-8').lstrip('\ufeff')
    except UnicodeDecodeError:
        return payload.decode('iso-8859-1')


class FieldExtractor:
    """
    Extrae los campos de interés de una NFe ya parseada. Es tolerante con los
    nodos opcionales pero falla de inmediato si falta alguna estructura obligatoria.
    """

    def __init__(self):
        self._parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False)

    def parse(self, payload: Union[bytes, str]):
        if isinstance(payload, str):
            content = XML_DECLARATION.sub("", payload.lstrip("\ufeff"), count=1).encode("utf-8")
        else:
            content = payload
        try:
            root = etree.fromstring(content, self._parser)
        except (etree.XMLSyntaxError, ValueError) as e:
            raise MalformedDocument(f"Invalid XML content: {e}") from e
        if root is None:
            raise MalformedDocument("Invalid XML content: empty document")
        return root

    def extract(self, tree, raw_content: Optional[str] = None) -> RawFields:
        inf_nfe = tree if etree.QName(tree).localname == ROOT_TAG else _find(tree, ROOT_TAG)
        ide = _find(inf_nfe, IDENTIFICATION_TAG) if inf_nfe is not None else None
        emit = _find(inf_nfe, ISSUER_TAG) if inf_nfe is not None else None
        total = _find(inf_nfe, TOTALS_TAG) if inf_nfe is not None else None

        if inf_nfe is None or ide is None or emit is None or total is None:
            raise MalformedDocument("Invalid document structure")

        dest = _find(inf_nfe, RECIPIENT_TAG)

        return RawFields(
            access_key_attr=(inf_nfe.get('Id') or '').strip(),
            number=_text(ide, 'nNF'),
            series=_text(ide, 'serie'),
            # dEmi es el campo de la versión 2.00 del layout
            issue_timestamp=_text(ide, 'dhEmi', 'dEmi'),
            issuer_tax_id=_text(emit, 'CNPJ', 'CPF'),
            issuer_name=_text(emit, 'xNome'),
            recipient_tax_id=_text(dest, 'CNPJ', 'CPF'),
            recipient_name=_text(dest, 'xNome'),
            total=_text(total, 'vNF'),
            icms=_text(total, 'vICMS'),
            ipi=_text(total, 'vIPI'),
            pis=_text(total, 'vPIS'),
            cofins=_text(total, 'vCOFINS'),
            raw_content=raw_content if raw_content is not None else etree.tostring(tree, encoding='unicode'),
        )

    def extract_payload(self, payload: Union[bytes, str]) -> RawFields:
        """Parsea y extrae en un solo paso, conservando el contenido original como texto."""
        tree = self.parse(payload)
        return self.extract(tree, raw_content=decode_payload(payload))
