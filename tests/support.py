from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from sekolah.database.base import Base
from sekolah.models import import_all_models


def make_session():
    import_all_models()
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine)
    return Session()
