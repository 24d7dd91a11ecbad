"""
Demo organisation for Acelera Corp: org chart, users and starting goals.

Used to populate a fresh data directory and by the tests.
"""
from typing import List

from core.models import (
    Goal,
    GoalMetric,
    GoalPeriod,
    GoalPlan,
    GoalReview,
    GoalStatus,
    OrgUnit,
    OrgUnitType,
    PlanPriority,
    PlanStatus,
    ReviewStatus,
    User,
    UserRole,
)

YEAR_START = "2024-01-01T00:00:00.000Z"
YEAR_END = "2024-12-31T23:59:59.999Z"

COMMON_TAGS = [
    "Compartir con mi equipo",
    "Compartir con mi líder",
]


def seed_org_units() -> List[OrgUnit]:
    return [
        OrgUnit("org-1", "Acelera Corp", OrgUnitType.COMPANY),
        OrgUnit("org-2", "Comité de Gerencia", OrgUnitType.C_LEVEL, parent_id="org-1"),
        OrgUnit("org-3", "VP Comercial", OrgUnitType.VP, parent_id="org-2", leader_user_id="user-4"),
        OrgUnit("org-4", "Ventas Norte", OrgUnitType.EQUIPO, parent_id="org-3", leader_user_id="user-7"),
        OrgUnit("org-5", "Ventas Sur", OrgUnitType.EQUIPO, parent_id="org-3", leader_user_id="user-8"),
        OrgUnit("org-6", "VP Tecnología", OrgUnitType.VP, parent_id="org-2", leader_user_id="user-5"),
        OrgUnit("org-7", "Desarrollo", OrgUnitType.GERENCIA, parent_id="org-6", leader_user_id="user-9"),
        OrgUnit("org-8", "Data & Analytics", OrgUnitType.GERENCIA, parent_id="org-6", leader_user_id="user-10"),
        OrgUnit("org-9", "VP Operaciones", OrgUnitType.VP, parent_id="org-2", leader_user_id="user-6"),
    ]


def seed_users() -> List[User]:
    return [
        User("user-1", "Carlos Rodriguez", "admin@aceleracorp.com", UserRole.ADMIN, "org-1", label="Admin"),
        User("user-2", "María González", "maria.gonzalez@aceleracorp.com", UserRole.DIRECTOR, "org-4", label="Director"),
        User("user-4", "Ana Martínez", "ana.martinez@aceleracorp.com", UserRole.VP, "org-3", label="Gerente"),
        User("user-7", "Luis Herrera", "luis.herrera@aceleracorp.com", UserRole.LIDER_EQUIPO, "org-4", label="Líder de equipo"),
        User("user-8", "Carmen Ruiz", "carmen.ruiz@aceleracorp.com", UserRole.LIDER_EQUIPO, "org-5"),
        User("user-9", "Fernando Castro", "fernando.castro@aceleracorp.com", UserRole.GERENTE, "org-7"),
        User("user-10", "Isabella Torres", "isabella.torres@aceleracorp.com", UserRole.GERENTE, "org-8"),
        User("user-11", "Andrés Jiménez", "andres.jimenez@aceleracorp.com", UserRole.COLABORADOR, "org-4"),
        User("user-12", "Sofía Vargas", "sofia.vargas@aceleracorp.com", UserRole.COLABORADOR, "org-5"),
        User("user-13", "Miguel Ángel Pérez", "miguel.perez@aceleracorp.com", UserRole.COLABORADOR, "org-7"),
        User("user-14", "Daniela Ramírez", "daniela.ramirez@aceleracorp.com", UserRole.COLABORADOR, "org-7"),
        User("user-15", "Alejandro Mendoza", "alejandro.mendoza@aceleracorp.com", UserRole.COLABORADOR, "org-8"),
        User("user-16", "Valentina Cruz", "valentina.cruz@aceleracorp.com", UserRole.COLABORADOR, "org-8"),
    ]


def _annual_goal(goal_id: str, org_unit_id: str, owner: str, title: str, description: str,
                 metrics: List[GoalMetric], tags: List[str], parent_goal_id: str = None) -> Goal:
    return Goal(
        id=goal_id,
        org_unit_id=org_unit_id,
        owner_user_id=owner,
        title=title,
        description=description,
        period=GoalPeriod.ANUAL,
        start_date=YEAR_START,
        end_date=YEAR_END,
        metrics=metrics,
        tags=tags,
        status=GoalStatus.ACTIVE,
        parent_goal_id=parent_goal_id,
        created_at=YEAR_START,
        updated_at=YEAR_START,
    )


def _sales_metrics() -> List[GoalMetric]:
    return [
        GoalMetric("Ventas totales", baseline=50, target=65, unit="millones USD"),
        GoalMetric("Crecimiento ventas", baseline=0, target=30, unit="%"),
    ]


def seed_goals() -> List[Goal]:
    revenue = _annual_goal(
        "goal-1", "org-4", "user-2",
        "Incrementar ingresos anuales en un 25%",
        "Alcanzar 125M USD en ingresos totales mediante la expansión de mercados existentes y la "
        "introducción de nuevas líneas de productos para el año fiscal 2024.",
        [
            GoalMetric("Ingresos totales", baseline=100, target=125, unit="millones USD"),
            GoalMetric("Crecimiento", baseline=0, target=25, unit="%"),
        ],
        ["ingresos", "crecimiento", "expansion"],
    )
    revenue.plans = [
        GoalPlan(
            id="plan-1",
            goal_id="goal-1",
            title="Expansión a mercados LATAM",
            description="Establecer operaciones comerciales en México, Colombia y Chile para Q2-Q3",
            due_date="2024-09-30T23:59:59.999Z",
            status=PlanStatus.IN_PROGRESS,
            priority=PlanPriority.HIGH,
            assigned_to="user-3",
            created_at="2024-01-15T00:00:00.000Z",
            updated_at="2024-03-01T00:00:00.000Z",
        ),
        GoalPlan(
            id="plan-2",
            goal_id="goal-4",
            title="Lanzamiento línea premium",
            description="Desarrollar y lanzar nueva línea de productos premium con margen 40% superior",
            due_date="2024-08-31T23:59:59.999Z",
            status=PlanStatus.PENDING,
            priority=PlanPriority.MEDIUM,
            assigned_to="user-2",
            created_at="2024-01-15T00:00:00.000Z",
            updated_at="2024-01-15T00:00:00.000Z",
        ),
    ]
    revenue.reviews = [
        GoalReview(
            id="review-1",
            goal_id="goal-1",
            review_date="2024-03-31T00:00:00.000Z",
            progress=35,
            status=ReviewStatus.ON_TRACK,
            reviewer_user_id="user-2",
            achievements=[
                "Completado estudio de mercado para LATAM",
                "Establecido equipo de expansión internacional",
                "Incremento 8% en ingresos Q1 vs objetivo 6.25%",
            ],
            challenges=[
                "Regulaciones más complejas en Colombia",
                "Competencia local fuerte en México",
            ],
            next_actions=[
                "Finalizar trámites legales en Colombia",
                "Iniciar campaña de marca en México",
                "Acelerar desarrollo de línea premium",
            ],
            notes="Progreso favorable pero necesario ajustar timeline para Colombia. "
                  "Considerar partnerships locales.",
            created_at="2024-03-31T15:00:00.000Z",
        )
    ]

    return [
        revenue,
        _annual_goal(
            "goal-2", "org-4", "user-2",
            "Mejorar satisfacción del cliente a 90% NPS",
            "Implementar programa de excelencia en servicio al cliente para alcanzar un Net Promoter "
            "Score de 90 puntos, mejorando la retención y recomendaciones.",
            [
                GoalMetric("Net Promoter Score", baseline=65, target=90, unit="puntos"),
                GoalMetric("Retención de clientes", baseline=80, target=95, unit="%"),
            ],
            ["satisfaccion", "nps", "retencion", "clientes"],
        ),
        _annual_goal(
            "goal-3", "org-2", "user-6",
            "Optimizar eficiencia operativa reduciendo costos en 15%",
            "Implementar iniciativas de automatización y mejora de procesos para reducir costos "
            "operativos en 15% manteniendo la calidad del servicio.",
            [
                GoalMetric("Reducción de costos", baseline=0, target=15, unit="%"),
                GoalMetric("Tiempo de procesamiento", baseline=48, target=36, unit="horas"),
            ],
            ["eficiencia", "costos", "automatizacion", "procesos"],
        ),
        _annual_goal(
            "goal-4", "org-1", "user-1",
            "Incrementar ingresos anuales en un 25%",
            "Incrementar ventas en territorios Norte y Sur mediante estrategias de penetración de "
            "mercado y cross-selling para contribuir al objetivo de crecimiento corporativo.",
            _sales_metrics(),
            ["ingresos", "ventas", "crecimiento", "mercados"],
            parent_goal_id="goal-1",
        ),
        _annual_goal(
            "goal-40", "org-3", "user-1",
            "Mejorar el margen operativo en 5 puntos porcentuales",
            "Reducir costos de producción y distribución en un 10% mediante optimización de la cadena "
            "de suministro y eficiencia energética, alcanzando un margen operativo del 18% para el año "
            "fiscal 2024.",
            _sales_metrics(),
            ["ingresos", "ventas", "crecimiento", "mercados"],
            parent_goal_id="goal-1",
        ),
        _annual_goal(
            "goal-41", "org-3", "user-1",
            "Lograr que el 40% del portafolio provenga de productos sostenibles",
            "Asegurar que para el año fiscal 2024 al menos el 40% de las ventas provengan de productos "
            "con envases reciclables o retornables, fortaleciendo la percepción de la marca como líder "
            "en sostenibilidad dentro de la industria de bebidas.",
            _sales_metrics(),
            ["ingresos", "ventas", "crecimiento", "mercados"],
            parent_goal_id="goal-1",
        ),
        _annual_goal(
            "goal-5", "org-5", "user-2",
            "Acelerar desarrollo de productos digitales en 40%",
            "Implementar metodologías ágiles y herramientas de automatización para reducir "
            "time-to-market de nuevos productos digitales en 40%.",
            [
                GoalMetric("Time to market", baseline=6, target=3.6, unit="meses"),
                GoalMetric("Productos lanzados", baseline=4, target=8, unit="productos"),
            ],
            ["productos", "desarrollo", "velocidad", "digitalizacion"],
            parent_goal_id="goal-1",
        ),
    ]
