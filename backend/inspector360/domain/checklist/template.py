# backend/inspector360/domain/checklist/template.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

CATEGORY_ORDER: tuple[str, ...] = ("documentacion", "electrico", "mecanico", "hidraulico", "general")

CHECKLIST_CATEGORIES: dict[str, str] = {
    "documentacion": "Documentación y Registro",
    "electrico": "Sistema Eléctrico",
    "mecanico": "Sistema Mecánico",
    "hidraulico": "Sistema Hidráulico",
    "general": "Condiciones Generales",
}

CATEGORY_COUNTS: dict[str, int] = {
    "documentacion": 8,
    "electrico": 11,
    "mecanico": 12,
    "hidraulico": 10,
    "general": 9,
}

CODE_PREFIX_TO_CATEGORY: dict[str, str] = {
    "DOC": "documentacion",
    "ELE": "electrico",
    "MEC": "mecanico",
    "HID": "hidraulico",
    "GEN": "general",
}


@dataclass(frozen=True)
class ChecklistTemplateItem:
    code: str
    category: str  # documentacion|electrico|mecanico|hidraulico|general
    description: str
    order_index: int


def _block(prefix: str, category: str, start: int, descriptions: tuple[str, ...]) -> tuple[ChecklistTemplateItem, ...]:
    return tuple(
        ChecklistTemplateItem(
            code=f"{prefix}-{i:02d}",
            category=category,
            description=desc,
            order_index=start + i - 1,
        )
        for i, desc in enumerate(descriptions, start=1)
    )


_DOC = (
    "Tarjeta de propiedad o registro del equipo vigente.",
    "Certificado de inspección técnica vigente.",
    "Póliza de seguro vigente y disponible.",
    "Bitácora de mantenimiento actualizada y firmada.",
    "Registro de inspección pre-uso del turno completo.",
    "Manual de operación disponible en el equipo.",
    "Placa de identificación y código del equipo legibles.",
    "Autorización de manejo en rampa del operador vigente.",
)

_ELE = (
    "Batería asegurada, sin sulfatación ni fugas.",
    "Bornes y terminales ajustados y protegidos.",
    "Cableado sin empalmes expuestos ni aislamiento dañado.",
    "Luces delanteras operativas.",
    "Luces traseras y de freno operativas.",
    "Circulina operativa y visible.",
    "Alarma de retroceso operativa.",
    "Bocina operativa.",
    "Tablero de instrumentos e indicadores funcionando.",
    "Sistema de carga (alternador) sin alarmas.",
    "Parada de emergencia operativa.",
)

_MEC = (
    "Motor sin fugas de aceite ni combustible.",
    "Nivel de aceite de motor dentro del rango.",
    "Nivel de refrigerante dentro del rango.",
    "Correas sin grietas y con tensión correcta.",
    "Sistema de escape sin fugas y con arrestachispas.",
    "Frenos de servicio operativos.",
    "Freno de estacionamiento operativo.",
    "Dirección sin juego excesivo.",
    "Neumáticos con presión correcta y sin desgaste.",
    "Aros y tuercas completos y ajustados.",
    "Suspensión sin daños visibles.",
    "Transmisión y cambios operativos.",
)

_HID = (
    "Nivel de aceite hidráulico dentro del rango.",
    "Mangueras hidráulicas sin fugas ni desgaste.",
    "Cilindros hidráulicos sin fugas.",
    "Bomba hidráulica sin ruidos anormales.",
    "Válvulas y mandos de control operativos.",
    "Acoples y conexiones ajustados.",
    "Filtros hidráulicos dentro de su vida útil.",
    "Presión de trabajo dentro de especificación.",
    "Estabilizadores operativos.",
    "Plataforma o sistema de elevación sin daños.",
)

_GEN = (
    "Extintor vigente, con pin de seguridad y manómetro en zona verde.",
    "Calzas disponibles, sin fisuras ni desgaste excesivo.",
    "Asiento y cinturón de seguridad en buen estado.",
    "Pintura y señalización sin deterioro.",
    "Cintas reflectivas adheridas y visibles.",
    "Bumpers sin daños que puedan afectar el fuselaje.",
    "Equipo limpio, sin objetos sueltos (FOD).",
    "Placards, stickers y micas legibles.",
    "Espejos retrovisores completos y ajustados.",
)

CHECKLIST_TEMPLATE: tuple[ChecklistTemplateItem, ...] = (
    _block("DOC", "documentacion", 1, _DOC)
    + _block("ELE", "electrico", 9, _ELE)
    + _block("MEC", "mecanico", 20, _MEC)
    + _block("HID", "hidraulico", 32, _HID)
    + _block("GEN", "general", 42, _GEN)
)

# Field form FOR-ATA-057: items filled per equipment in the wizard.
FOR_ATA_057_ITEMS: tuple[ChecklistTemplateItem, ...] = _block(
    "CHK",
    "general",
    1,
    (
        "Extintor vigente: verificar presencia, fecha de vencimiento y de ultima inspección. El manómetro en zona verde.",
        "Pin de seguridad: comprobar que esté colocado correctamente y sin deformaciones.",
        "Calzas: deben estar disponibles, sin fisuras ni desgaste excesivo.",
        "Placards, stickers y micas: deben estar legibles, adheridos y sin daños.",
        "Nivel de combustible: debe ser suficiente para la operación prevista.",
        "Asiento y cinturón de seguridad: revisar estado, anclaje y funcionamiento.",
        (
            "Circulina operativa: encender y comprobar visibilidad. (Aplica a todos los equipos). "
            "Alarma de retroceso operativo (Aplica a FT-PM-TR)"
        ),
        "Luces operativas: verificar luces delanteras, traseras y de freno.",
        "Cintas reflectivas: deben estar adheridas y visibles.",
        "Pintura: sin deterioro que afecte señalización o visibilidad del equipo.",
        "Neumáticos sin desgaste: revisar presión y ausencia de grietas o desgaste de las llantas.",
        "Frenos operativos (Freno de pedal y parqueo o mano): probar funcionamiento antes de iniciar el desplazamiento.",
        "Bumpers: sin rayones, desgaste que pueda causar daños al fuselaje del avión (Aplica a FT-EM)",
        "Sólo escaleras: estabilizadores operativos, peldaños y cintas antideslizantes en buen estado, luces operativas",
    ),
)

_BY_CODE: dict[str, ChecklistTemplateItem] = {it.code: it for it in CHECKLIST_TEMPLATE + FOR_ATA_057_ITEMS}


def get_item(code: Optional[str]) -> Optional[ChecklistTemplateItem]:
    if not code:
        return None
    return _BY_CODE.get(code.strip().upper())


def is_known_code(code: Optional[str]) -> bool:
    return get_item(code) is not None


def describe(code: str) -> str:
    """Template description for a code, or the raw code when the lookup misses."""
    it = get_item(code)
    return it.description if it is not None else code


def category_for_code(code: str) -> str:
    prefix = (code or "").strip().upper().split("-", 1)[0]
    return CODE_PREFIX_TO_CATEGORY.get(prefix, "general")


def grouped_by_category() -> dict[str, list[ChecklistTemplateItem]]:
    grouped: dict[str, list[ChecklistTemplateItem]] = {c: [] for c in CATEGORY_ORDER}
    for it in CHECKLIST_TEMPLATE:
        grouped[it.category].append(it)
    return grouped
