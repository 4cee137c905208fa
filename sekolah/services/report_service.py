"""Report building: records in, a format-neutral table model out.

Renderers in :mod:`sekolah.services.report_export` only ever see
:class:`Report`; they know nothing about medicines or inventory.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Sequence, Union

from sqlalchemy.orm import Session

from sekolah.config import get_settings
from sekolah.core.access import ensure_location_allowed
from sekolah.core.constants import LOKASI_ORDER, Kondisi, Lokasi
from sekolah.core.dates import normalize_date
from sekolah.core.stock_rules import is_low_stock, stock_status
from sekolah.models.inventaris import Inventaris
from sekolah.models.obat import Obat
from sekolah.services.inventaris_service import list_inventaris
from sekolah.services.obat_service import list_obat, sweep_before_read

REPORT_TYPES = ("overview", "inventory", "medicine", "condition", "all")
REPORT_TITLE = "Laporan Inventaris Sekolah"
DEFAULT_PERIOD = "Bulan Ini"

PRIMARY_HEADER_COLOR = "3B82F6"
ALERT_HEADER_COLOR = "EF4444"

Cell = Union[str, int, date, None]


@dataclass(frozen=True)
class ReportColumn:
    header: str
    align: str = "left"


@dataclass
class ReportSection:
    title: str
    sheet: str
    columns: list[ReportColumn]
    rows: list[list[Cell]] = field(default_factory=list)
    empty_message: Optional[str] = None
    header_color: str = PRIMARY_HEADER_COLOR


@dataclass
class Report:
    title: str
    report_type: str
    period: str
    generated_on: date
    sections: list[ReportSection] = field(default_factory=list)

    def filename(self, extension: str) -> str:
        return f"laporan-{self.report_type}-{self.generated_on.isoformat()}.{extension}"


def display_lokasi(value) -> str:
    """TK is shown under its public name in reports; stored data keeps TK."""
    text = value.value if isinstance(value, Lokasi) else str(value or "")
    if text == Lokasi.TK.value:
        return get_settings().TK_DISPLAY_LABEL
    return text


def sort_obat(obat_list: Sequence[Obat]) -> list[Obat]:
    return sorted(
        obat_list,
        key=lambda item: (LOKASI_ORDER.get(item.lokasi, 99), (item.nama_obat or "").casefold()),
    )


def report_statistics(inventaris: Sequence[Inventaris], obat: Sequence[Obat]) -> dict:
    kondisi_barang: dict[str, int] = {}
    kategori_inventaris: dict[str, int] = {}
    lokasi_distribution: dict[str, int] = {}

    for item in inventaris:
        kondisi_barang[item.kondisi] = kondisi_barang.get(item.kondisi, 0) + item.jumlah
        kategori_inventaris[item.kategori] = kategori_inventaris.get(item.kategori, 0) + item.jumlah
        lokasi_distribution[item.lokasi] = lokasi_distribution.get(item.lokasi, 0) + item.jumlah
    for item in obat:
        lokasi_distribution[item.lokasi] = lokasi_distribution.get(item.lokasi, 0) + item.jumlah

    return {
        "total_inventaris": sum(item.jumlah for item in inventaris),
        "total_obat": sum(item.jumlah for item in obat),
        "kondisi_barang": kondisi_barang,
        "kategori_inventaris": kategori_inventaris,
        "lokasi_distribution": dict(
            sorted(lokasi_distribution.items(), key=lambda entry: LOKASI_ORDER.get(entry[0], 99))
        ),
        "low_stock_count": sum(1 for item in obat if is_low_stock(item.jumlah, item.batas_minimal)),
        "damaged_items_count": sum(
            1 for item in inventaris if item.kondisi == Kondisi.RUSAK_BERAT.value
        ),
    }


def _input_date(item) -> Optional[date]:
    return normalize_date(item.tanggal_input or item.created_at or item.updated_at)


def summary_sections(stats: dict) -> list[ReportSection]:
    pair = [ReportColumn("Kategori"), ReportColumn("Jumlah", "right")]
    return [
        ReportSection(
            title="Ringkasan Statistik",
            sheet="Ringkasan",
            columns=pair,
            rows=[
                ["Total Inventaris", stats["total_inventaris"]],
                ["Total Obat-obatan", stats["total_obat"]],
                ["Barang Rusak", stats["damaged_items_count"]],
                ["Stok Obat Menipis", stats["low_stock_count"]],
            ],
        ),
        ReportSection(
            title="Distribusi Kategori",
            sheet="Ringkasan",
            columns=pair,
            rows=[[kategori, total] for kategori, total in stats["kategori_inventaris"].items()],
            empty_message="Belum ada data inventaris.",
        ),
        ReportSection(
            title="Distribusi Lokasi",
            sheet="Ringkasan",
            columns=[ReportColumn("Lokasi"), ReportColumn("Jumlah", "right")],
            rows=[
                [display_lokasi(lokasi), total]
                for lokasi, total in stats["lokasi_distribution"].items()
            ],
            empty_message="Belum ada data.",
        ),
    ]


def medicine_section(obat: Sequence[Obat], today: Optional[date] = None) -> ReportSection:
    days = get_settings().EXPIRING_SOON_DAYS
    return ReportSection(
        title="Laporan Obat-obatan",
        sheet="Data Obat",
        columns=[
            ReportColumn("Nama Obat"),
            ReportColumn("Stok", "right"),
            ReportColumn("Satuan", "center"),
            ReportColumn("Lokasi", "center"),
            ReportColumn("Batas Minimal", "right"),
            ReportColumn("Tanggal Kadaluarsa", "center"),
            ReportColumn("Status", "center"),
            ReportColumn("Tanggal Input", "center"),
            ReportColumn("Keterangan"),
        ],
        rows=[
            [
                item.nama_obat,
                item.jumlah,
                item.satuan or "-",
                display_lokasi(item.lokasi),
                item.batas_minimal,
                item.tanggal_kadaluarsa,
                stock_status(item, today, days),
                _input_date(item),
                item.keterangan or "",
            ]
            for item in sort_obat(obat)
        ],
        empty_message="Belum ada data obat.",
    )


def inventory_section(inventaris: Sequence[Inventaris]) -> ReportSection:
    return ReportSection(
        title="Data Inventaris",
        sheet="Data Inventaris",
        columns=[
            ReportColumn("Nama Barang"),
            ReportColumn("Kategori"),
            ReportColumn("Jumlah", "right"),
            ReportColumn("Lokasi", "center"),
            ReportColumn("Kondisi", "center"),
            ReportColumn("Keterangan"),
            ReportColumn("Tanggal Input", "center"),
        ],
        rows=[
            [
                item.nama_barang,
                item.kategori,
                item.jumlah,
                display_lokasi(item.lokasi),
                item.kondisi,
                item.keterangan or "-",
                _input_date(item),
            ]
            for item in inventaris
        ],
        empty_message="Belum ada data inventaris.",
    )


def condition_section(inventaris: Sequence[Inventaris]) -> ReportSection:
    return ReportSection(
        title="Barang yang Perlu Perhatian",
        sheet="Perlu Perhatian",
        columns=[
            ReportColumn("Nama Barang"),
            ReportColumn("Kategori"),
            ReportColumn("Kondisi", "center"),
            ReportColumn("Jumlah", "right"),
            ReportColumn("Lokasi", "center"),
            ReportColumn("Keterangan"),
            ReportColumn("Tanggal Input", "center"),
        ],
        rows=[
            [
                item.nama_barang,
                item.kategori,
                item.kondisi,
                item.jumlah,
                display_lokasi(item.lokasi),
                item.keterangan or "-",
                _input_date(item),
            ]
            for item in inventaris
            if item.kondisi != Kondisi.BAIK.value
        ],
        empty_message="Tidak ada barang yang perlu perhatian.",
        header_color=ALERT_HEADER_COLOR,
    )


def build_report(
    report_type: str,
    inventaris: Sequence[Inventaris],
    obat: Sequence[Obat],
    *,
    period: str = DEFAULT_PERIOD,
    today: Optional[date] = None,
) -> Report:
    if report_type not in REPORT_TYPES:
        raise ValueError(f"Unknown report type: {report_type}")
    today = today or date.today()

    sections: list[ReportSection] = []
    if report_type in ("overview", "all"):
        sections.extend(summary_sections(report_statistics(inventaris, obat)))
    if report_type in ("overview", "medicine", "all"):
        sections.append(medicine_section(obat, today))
    if report_type in ("inventory", "all"):
        sections.append(inventory_section(inventaris))
    if report_type in ("condition", "all"):
        sections.append(condition_section(inventaris))

    return Report(
        title=REPORT_TITLE,
        report_type=report_type,
        period=period,
        generated_on=today,
        sections=sections,
    )


def load_report_data(
    db: Session,
    locations: frozenset[Lokasi],
    *,
    lokasi: Optional[str] = None,
) -> tuple[list[Inventaris], list[Obat]]:
    if lokasi:
        ensure_location_allowed(lokasi, locations)
    sweep_before_read(db, locations)
    inventaris = list_inventaris(db, locations, lokasi=lokasi)
    obat = list_obat(db, locations, lokasi=lokasi)
    return inventaris, obat


def period_label(period: Optional[str], lokasi: Optional[str] = None) -> str:
    label = (period or "").strip() or DEFAULT_PERIOD
    if lokasi:
        label = f"{label} • Lokasi: {display_lokasi(lokasi)}"
    return label


__all__ = [
    "REPORT_TYPES",
    "Report",
    "ReportColumn",
    "ReportSection",
    "build_report",
    "display_lokasi",
    "load_report_data",
    "period_label",
    "report_statistics",
    "sort_obat",
]
