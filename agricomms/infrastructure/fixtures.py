"""Demonstration data used to seed empty cooperative registries."""

from __future__ import annotations

from agricomms.domain.entities import (
    Announcement,
    AnnouncementComment,
    Attachment,
    Message,
    ReadReceipt,
)
from agricomms.utils import parse_iso


def _at(value: str):
    return parse_iso(value)


def _demo_receipts(count: int, read_at: str) -> list[ReadReceipt]:
    return [
        ReadReceipt(member_id=f"demo-member-{index}", member_name=f"Membre {index}", read_at=_at(read_at))
        for index in range(1, count + 1)
    ]


def demo_messages() -> list[Message]:
    """Return the sample messages shown to a cooperative without history."""

    return [
        Message(
            id="1",
            subject="Maintenance des entrepôts",
            content=(
                "La maintenance annuelle des entrepôts est prévue pour le 15 octobre. "
                "Veuillez préparer vos stocks."
            ),
            type="reminder",
            priority="medium",
            sender="Direction Technique",
            sender_role="admin",
            recipients=["all"],
            target_groups=["warehouse_managers", "members"],
            status="delivered",
            created_at=_at("2024-10-01T10:00:00Z"),
            scheduled_at=_at("2024-10-01T10:00:00Z"),
            delivered_at=_at("2024-10-01T10:05:00Z"),
            read_by=[
                ReadReceipt("1", "Jean Dupont", _at("2024-10-01T10:15:00Z")),
                ReadReceipt("2", "Marie Martin", _at("2024-10-01T11:20:00Z")),
            ],
        ),
        Message(
            id="2",
            subject="Nouvelle commande groupée",
            content=(
                "Une nouvelle commande groupée d'engrais est ouverte. "
                "Date limite de participation: 20 octobre."
            ),
            type="announcement",
            priority="high",
            sender="Service des Approvisionnements",
            sender_role="staff",
            recipients=["all"],
            target_groups=["members"],
            status="sent",
            created_at=_at("2024-10-02T14:30:00Z"),
            attachments=[
                Attachment(
                    name="catalogue_engrais.pdf",
                    type="pdf",
                    size="2.5MB",
                    url="/files/catalogue_engrais.pdf",
                )
            ],
        ),
        Message(
            id="3",
            subject="Alerte météo",
            content=(
                "Des fortes pluies sont attendues dans la région. "
                "Veuillez sécuriser vos équipements et stocks."
            ),
            type="alert",
            priority="urgent",
            sender="Comité de Sécurité",
            sender_role="committee",
            recipients=["all"],
            target_groups=["all"],
            status="read",
            created_at=_at("2024-10-03T08:00:00Z"),
            delivered_at=_at("2024-10-03T08:01:00Z"),
            read_at=_at("2024-10-03T08:30:00Z"),
        ),
    ]


def demo_announcements() -> list[Announcement]:
    """Return the sample announcements shown to a cooperative without history.

    Every seeded ``read_count`` matches the length of its ``read_by`` list.
    """

    return [
        Announcement(
            id="1",
            title="Assemblée Générale Annuelle",
            content=(
                "L'assemblée générale annuelle de la coopérative se tiendra le "
                "25 novembre 2024 à 14h. Tous les membres sont invités à participer."
            ),
            type="important",
            author="Présidence",
            author_role="committee",
            status="published",
            visibility="all",
            created_at=_at("2024-10-01T09:00:00Z"),
            updated_at=_at("2024-10-01T09:00:00Z"),
            read_count=45,
            read_by=_demo_receipts(45, "2024-10-01T12:00:00Z"),
            comments=[
                AnnouncementComment(
                    id="1",
                    author="Jean Dupont",
                    author_role="member",
                    content="Serait-il possible d'avoir l'ordre du jour à l'avance ?",
                    created_at=_at("2024-10-01T10:30:00Z"),
                )
            ],
        ),
        Announcement(
            id="2",
            title="Nouveaux tarifs de transport",
            content=(
                "À compter du 1er novembre, de nouveaux tarifs de transport seront "
                "appliqués pour les livraisons. Consultez le tableau détaillé."
            ),
            type="general",
            author="Service Logistique",
            author_role="staff",
            status="published",
            visibility="all",
            created_at=_at("2024-10-02T16:00:00Z"),
            updated_at=_at("2024-10-02T16:00:00Z"),
            read_count=32,
            read_by=_demo_receipts(32, "2024-10-02T18:00:00Z"),
            attachments=[
                Attachment(
                    name="tarifs_transport_nov2024.pdf",
                    type="pdf",
                    size="1.8MB",
                    url="/files/tarifs_transport.pdf",
                )
            ],
        ),
        Announcement(
            id="3",
            title="Urgence: Problème système",
            content=(
                "Le système de gestion des stocks est temporairement indisponible. "
                "Nos techniciens travaillent sur une résolution."
            ),
            type="emergency",
            author="Direction Informatique",
            author_role="admin",
            status="published",
            visibility="all",
            created_at=_at("2024-10-03T11:00:00Z"),
            updated_at=_at("2024-10-03T12:30:00Z"),
            expires_at=_at("2024-10-03T18:00:00Z"),
            read_count=67,
            read_by=_demo_receipts(67, "2024-10-03T13:00:00Z"),
        ),
    ]


__all__ = ["demo_announcements", "demo_messages"]
