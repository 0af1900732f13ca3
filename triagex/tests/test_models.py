from fastapi.testclient import TestClient
from sqlalchemy import text

from triagex.models.assessment import Assessment
from triagex.models.user import User


def test_user_assessments_relationship(db, user):
    db.add(Assessment(user_id=user.id, symptoms=["fever"], diagnosis="Fever - Monitor temperature and stay hydrated"))
    db.add(Assessment(user_id=user.id, symptoms=[{"name": "Cough"}], diagnosis="Cough - Stay hydrated and rest"))
    db.commit()

    loaded = db.query(User).filter_by(id=user.id).one()
    assert len(loaded.assessments) == 2
    assert all(a.user.id == user.id for a in loaded.assessments)
    assert all(a.created_at is not None for a in loaded.assessments)


def test_symptoms_are_encrypted_at_rest(db, user):
    record = Assessment(user_id=user.id, symptoms=[{"name": "Chest Pain", "severity": "high"}], diagnosis="x")
    db.add(record)
    db.commit()

    raw = db.execute(text("SELECT symptoms FROM assessments WHERE id = :id"), {"id": record.id}).scalar_one()
    assert "Chest Pain" not in raw

    db.expire_all()
    assert db.get(Assessment, record.id).symptoms == [{"name": "Chest Pain", "severity": "high"}]


def test_lifespan_creates_tables_and_seeds_demo_user(db, monkeypatch):
    import triagex.app as app_mod
    import triagex.db.session as session_mod

    monkeypatch.setenv("DEMO_USER_EMAIL", "Demo@Example.com")
    monkeypatch.setenv("DEMO_USER_PASSWORD", "demo-pass")
    monkeypatch.setattr(app_mod, "SessionLocal", session_mod.SessionLocal)

    with TestClient(app_mod.app) as client:
        assert client.get("/").status_code == 200

    seeded = db.query(User).filter(User.email == "demo@example.com").all()
    assert len(seeded) == 1
    assert seeded[0].name == "Demo User"
