"""create pfmp tables

Revision ID: 3f9a1c2d7e10
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f9a1c2d7e10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("nom", sa.String(length=100), nullable=False),
        sa.Column("prenom", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.Enum("admin", "professeur", name="user_role"), nullable=False),
        sa.Column("createdAt", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("email"),
    )
    op.create_table(
        "classes",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("nom", sa.String(length=50), nullable=False),
        sa.Column("annee", sa.String(length=9), nullable=False),
        sa.Column("professeurPrincipal", sa.String(length=200), nullable=False),
        sa.Column("createdAt", sa.DateTime(), nullable=True),
        sa.Column("updatedAt", sa.DateTime(), nullable=True),
    )
    op.create_table(
        "eleves",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("nom", sa.String(length=100), nullable=False),
        sa.Column("prenom", sa.String(length=100), nullable=False),
        sa.Column("classeId", sa.String(length=32), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("dateNaissance", sa.Date(), nullable=True),
        sa.Column("createdAt", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_eleves_classeId", "eleves", ["classeId"])
    op.create_table(
        "periodesStage",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("nom", sa.String(length=100), nullable=False),
        sa.Column("dateDebut", sa.Date(), nullable=False),
        sa.Column("dateFin", sa.Date(), nullable=False),
    )
    op.create_table(
        "evaluations",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("eleveId", sa.String(length=32), nullable=False),
        sa.Column("periodeId", sa.String(length=32), nullable=False),
        sa.Column("dateEvaluation", sa.DateTime(), nullable=False),
        sa.Column("competences", sa.JSON(), nullable=False),
        sa.Column("commentaireGeneral", sa.Text(), nullable=False),
        sa.Column("recommandations", sa.Text(), nullable=False),
        sa.Column("nomEntreprise", sa.String(length=200), nullable=True),
        sa.Column("domaineActivite", sa.String(length=200), nullable=True),
        sa.Column("nomTuteur", sa.String(length=200), nullable=True),
        sa.UniqueConstraint("eleveId", "periodeId", name="unique_eleve_periode"),
    )
    op.create_index("ix_evaluations_eleveId", "evaluations", ["eleveId"])
    op.create_index("ix_evaluations_periodeId", "evaluations", ["periodeId"])


def downgrade():
    op.drop_index("ix_evaluations_periodeId", table_name="evaluations")
    op.drop_index("ix_evaluations_eleveId", table_name="evaluations")
    op.drop_table("evaluations")
    op.drop_table("periodesStage")
    op.drop_index("ix_eleves_classeId", table_name="eleves")
    op.drop_table("eleves")
    op.drop_table("classes")
    op.drop_table("users")
