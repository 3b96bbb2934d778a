"""
Demo dataset
Seeds an empty store so the app is never empty on first run
"""

from datetime import datetime
from typing import List
from .models.enums import UserRole
from .schemas.event import Comment, Event
from .schemas.user import User


def _avatar(name: str, background: str) -> str:
    return (
        "https://ui-avatars.com/api/?name="
        f"{name.replace(' ', '+')}&background={background}&color=fff"
    )


def mock_users() -> List[User]:
    """Demo users, one per role"""
    users_data = [
        {
            "id": "1",
            "name": "Juan Pérez",
            "email": "juan@example.com",
            "background": "3b82f6",
            "role": UserRole.USER,
            "created_at": datetime(2024, 1, 15),
        },
        {
            "id": "2",
            "name": "Ana García",
            "email": "ana.moderator@example.com",
            "background": "10b981",
            "role": UserRole.MODERATOR,
            "created_at": datetime(2024, 1, 10),
        },
        {
            "id": "3",
            "name": "Carlos Admin",
            "email": "carlos.admin@example.com",
            "background": "dc2626",
            "role": UserRole.ADMIN,
            "created_at": datetime(2024, 1, 1),
        },
    ]

    return [
        User(
            id=data["id"],
            name=data["name"],
            email=data["email"],
            profile_image=_avatar(data["name"], data["background"]),
            role=data["role"],
            created_at=data["created_at"],
        )
        for data in users_data
    ]


def mock_events() -> List[Event]:
    """Demo events; like counts always match their liker lists"""
    events_data = [
        {
            "id": "1",
            "title": "Festival de Jazz en el Parque",
            "description": "Un evento musical único con los mejores artistas de jazz "
            "de la región. Disfruta de una tarde llena de música en vivo, comida "
            "gourmet y un ambiente familiar.",
            "date": "2024-12-15",
            "time": "18:00",
            "location": "Parque Central, Buenos Aires",
            "category": "Música",
            "image_url": "https://images.unsplash.com/photo-1493225457124-a3eb161ffa5f"
            "?w=800&h=400&fit=crop",
            "price": 2500,
            "organizer_name": "Ana García",
            "created_by": "2",
            "created_at": datetime(2024, 11, 1),
            "liked_by": ["1", "3"],
            "attendees": ["1", "3"],
            "comments": [
                Comment(
                    id="1",
                    event_id="1",
                    user_id="1",
                    user_name="Juan Pérez",
                    user_profile_image=_avatar("Juan Perez", "3b82f6"),
                    content="¡Excelente evento! No puedo esperar a asistir.",
                    created_at=datetime(2024, 11, 2),
                )
            ],
        },
        {
            "id": "2",
            "title": "Feria Gastronómica Internacional",
            "description": "Descubre sabores de todo el mundo en nuestra feria "
            "gastronómica. Más de 50 stands con comida típica de diferentes países.",
            "date": "2024-12-20",
            "time": "12:00",
            "location": "Centro de Convenciones, Córdoba",
            "category": "Gastronomía",
            "image_url": "https://images.unsplash.com/photo-1555939594-58d7cb561ad1"
            "?w=800&h=400&fit=crop",
            "price": 0,
            "organizer_name": "Carlos Admin",
            "created_by": "3",
            "created_at": datetime(2024, 11, 5),
            "liked_by": ["1", "2"],
            "attendees": ["1", "2"],
        },
        {
            "id": "3",
            "title": "Tour Histórico por el Casco Antiguo",
            "description": "Recorre los lugares más emblemáticos de la ciudad con "
            "guías especializados. Conoce la historia y arquitectura colonial.",
            "date": "2024-12-25",
            "time": "10:00",
            "location": "Plaza de Armas, Salta",
            "category": "Turismo",
            "image_url": "https://images.unsplash.com/photo-1539650116574-75c0c6d73f6e"
            "?w=800&h=400&fit=crop",
            "price": 1500,
            "organizer_name": "Ana García",
            "created_by": "2",
            "created_at": datetime(2024, 11, 8),
            "liked_by": ["3"],
            "attendees": ["3"],
        },
        {
            "id": "4",
            "title": "Exposición de Arte Contemporáneo",
            "description": "Muestra de obras de artistas emergentes locales. Una "
            "oportunidad única para conocer el talento artístico de la región.",
            "date": "2024-12-30",
            "time": "16:00",
            "location": "Museo de Arte Moderno, Rosario",
            "category": "Arte",
            "image_url": "https://images.unsplash.com/photo-1541961017774-22349e4a1262"
            "?w=800&h=400&fit=crop",
            "price": 800,
            "organizer_name": "Carlos Admin",
            "created_by": "3",
            "created_at": datetime(2024, 11, 10),
            "liked_by": ["1", "2"],
            "attendees": ["1", "2"],
        },
    ]

    return [Event(likes=len(data["liked_by"]), **data) for data in events_data]
