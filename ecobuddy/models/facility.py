"""
Facility and Category Models
"""

from ecobuddy.extensions import db


class Category(db.Model):
    """Category a facility belongs to (recycling bin, charger, ...)"""
    __tablename__ = 'categories'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, unique=True)

    facilities = db.relationship('Facility', back_populates='category_ref', lazy=True)

    def to_dict(self):
        return {'id': self.id, 'name': self.name}

    def __repr__(self):
        return f'<Category {self.name}>'


class Facility(db.Model):
    """A located community facility"""
    __tablename__ = 'facilities'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    category = db.Column(db.Integer, db.ForeignKey('categories.id'), nullable=False, index=True)
    description = db.Column(db.Text, nullable=False)

    # Address, column names follow the public JSON keys
    house_number = db.Column('houseNumber', db.String(50))
    street_name = db.Column('streetName', db.String(200))
    town = db.Column(db.String(100), index=True)
    county = db.Column(db.String(100))
    postcode = db.Column(db.String(20))

    lat = db.Column(db.Float)
    lng = db.Column(db.Float)

    contributor = db.Column(db.String(100))
    comments = db.Column(db.String(100))

    category_ref = db.relationship('Category', back_populates='facilities')

    @property
    def category_name(self):
        return self.category_ref.name if self.category_ref else None

    @property
    def has_location(self):
        return self.lat is not None and self.lng is not None

    @property
    def address(self):
        parts = [self.house_number, self.street_name, self.town, self.county, self.postcode]
        return ', '.join(p for p in parts if p)

    def to_dict(self):
        """Serialize with every field the map and table need."""
        return {
            'id': self.id,
            'title': self.title,
            'category': self.category,
            'category_name': self.category_name,
            'description': self.description,
            'houseNumber': self.house_number,
            'streetName': self.street_name,
            'town': self.town,
            'county': self.county,
            'postcode': self.postcode,
            'lat': self.lat,
            'lng': self.lng,
            'contributor': self.contributor,
            'comments': self.comments,
        }

    def __repr__(self):
        return f'<Facility {self.id} {self.title}>'
