# -*- coding: utf-8 -*-
"""
Translation dictionaries for English and Portuguese.

This module contains all translatable strings for the Driver Log application.
"""

MONTH_NAMES = {
    "en": [
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ],
    "pt": [
        "janeiro", "fevereiro", "março", "abril", "maio", "junho",
        "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
    ],
}

TRANSLATIONS = {
    "en": {
        # Application
        "app.name": "Driver Log",

        # Modes
        "mode.normal": "NORMAL",
        "mode.daily": "DAILY",

        # Fields
        "field.parcel_count": "Parcels",
        "field.collection_count": "Collections",
        "field.route_id": "Route ID",

        # Validation
        "validation.route_id_required": "Enter the route ID.",
        "validation.first_route_id_required": "Enter at least ID 1.",
        "validation.second_route_id_required": "Enter ID 2.",
        "validation.negative_count": "{field} cannot be negative.",
        "validation.count_too_large": "{field} cannot be more than {max}.",
        "validation.too_many_photos": "At most {max} photos can be attached.",
        "validation.invalid_record": "Invalid entry: {details}",

        # Storage
        "storage.quota_exceeded": "Storage full. Try removing old photos or clearing history.",
        "storage.unavailable": "Storage is unavailable: {details}",
        "storage.record_not_found": "Record {record_id} was not found.",
        "storage.photo_not_found": "Photo {reference} was not found.",
        "storage.no_photo_store": "Photo storage is not configured.",

        # History lines
        "summary.normal": "{parcels} pcts + {collections} cols",
        "summary.daily_single": "Fixed ({parcels} pcts)",
        "summary.daily_double": "{parcels} pcts ({tier})",
        "history.empty": "No records found for this period.",
        "history.group_count": "{count} rec.",
        "history.all_months": "All months",

        # Dashboard
        "dashboard.title": "Dashboard",
        "dashboard.month_earnings": "Earnings (Month)",
        "dashboard.deliveries": "Deliveries",
        "dashboard.average_per_day": "Avg/Day",
        "dashboard.recent": "Last entries",
        "dashboard.no_data": "Not enough data",

        # Reports
        "report.sheet.records": "Records",
        "report.sheet.dashboard": "Dashboard",
        "report.dashboard.title": "Earnings - {period}",
        "report.dashboard.chart": "Recent earnings",
        "report.dashboard.value": "Value",
        "report.dashboard.day": "Day",

        # Entry
        "entry.saved": "Saved {mode} entry for {date}: {total}",
        "entry.deleted": "Deleted record {record_id}",
        "entry.quote": "Estimated total: {total}",
        "entry.tier": "Tier: {tier}",
    },
    "pt": {
        # Application
        "app.name": "Driver Log",

        # Modes
        "mode.normal": "NORMAL",
        "mode.daily": "DIÁRIA",

        # Fields
        "field.parcel_count": "Parcelas",
        "field.collection_count": "Coletas",
        "field.route_id": "ID da rota",

        # Validation
        "validation.route_id_required": "Informe o ID da rota.",
        "validation.first_route_id_required": "Informe pelo menos o ID 1.",
        "validation.second_route_id_required": "Informe o ID 2.",
        "validation.negative_count": "{field} não pode ser negativo.",
        "validation.count_too_large": "{field} não pode ser maior que {max}.",
        "validation.too_many_photos": "No máximo {max} fotos podem ser anexadas.",
        "validation.invalid_record": "Registro inválido: {details}",

        # Storage
        "storage.quota_exceeded": "Atenção: Armazenamento cheio. Tente remover fotos antigas ou limpar o histórico.",
        "storage.unavailable": "Armazenamento indisponível: {details}",
        "storage.record_not_found": "Registro {record_id} não encontrado.",
        "storage.photo_not_found": "Foto {reference} não encontrada.",
        "storage.no_photo_store": "Armazenamento de fotos não configurado.",

        # History lines
        "summary.normal": "{parcels} pcts + {collections} cols",
        "summary.daily_single": "Fixo ({parcels} pcts)",
        "summary.daily_double": "{parcels} pcts ({tier})",
        "history.empty": "Nenhum registro encontrado para este período.",
        "history.group_count": "{count} reg.",
        "history.all_months": "Todos os meses",

        # Dashboard
        "dashboard.title": "Painel",
        "dashboard.month_earnings": "Ganhos (Mês)",
        "dashboard.deliveries": "Entregas",
        "dashboard.average_per_day": "Média/Dia",
        "dashboard.recent": "Últimos registros",
        "dashboard.no_data": "Sem dados suficientes",

        # Reports
        "report.sheet.records": "Registros",
        "report.sheet.dashboard": "Painel",
        "report.dashboard.title": "Ganhos - {period}",
        "report.dashboard.chart": "Ganhos recentes",
        "report.dashboard.value": "Valor",
        "report.dashboard.day": "Dia",

        # Entry
        "entry.saved": "Registro {mode} salvo para {date}: {total}",
        "entry.deleted": "Registro {record_id} removido",
        "entry.quote": "Total estimado: {total}",
        "entry.tier": "Etapa: {tier}",
    },
}
