"""
Movie recommendation with matrix factorization.
"""

from ..services.data_loader import ColumnSpec, DatasetSpec
from ..services.movie_catalog import MovieCatalog
from ..services.recommender import MatrixFactorizationRecommender
from .base import Recipe, RecipeResult

RATING_COLUMNS = [
    ColumnSpec(name="user_id", index=0),
    ColumnSpec(name="movie_id", index=1),
    ColumnSpec(name="rating", index=2),
]

TRAIN_DATASET = DatasetSpec(filename="recommendation-ratings-train.csv", columns=RATING_COLUMNS)
TEST_DATASET = DatasetSpec(filename="recommendation-ratings-test.csv", columns=RATING_COLUMNS)
MOVIES_FILE = "recommendation-movies.csv"

FACTORIZATION_RANK = 100
FACTORIZATION_ITERATIONS = 20
SAMPLE_USER = 999
SAMPLE_MOVIE = 10
TOP_MOVIE_COUNT = 5
RECOMMEND_THRESHOLD = 3.5


class MovieRecommenderRecipe(Recipe):
    name = "movie-recommender"
    description = "Recommend movies with low-rank matrix factorization"

    def execute(self) -> RecipeResult:
        self.say("Loading data...")
        train = self.loader.load(TRAIN_DATASET).dropna()
        test = self.loader.load(TEST_DATASET).dropna()
        for frame in (train, test):
            frame["user_id"] = frame["user_id"].astype(int)
            frame["movie_id"] = frame["movie_id"].astype(int)
        catalog = MovieCatalog.from_csv(self.loader.resolve(MOVIES_FILE))

        self.say("Training model...")
        recommender = MatrixFactorizationRecommender(
            rank=FACTORIZATION_RANK,
            iterations=FACTORIZATION_ITERATIONS,
            random_state=self.random_state,
        ).fit(train)

        self.say("Evaluating model...")
        predictions = recommender.predict(test["user_id"].tolist(), test["movie_id"].tolist())
        metrics = self.evaluator.evaluate(test["rating"], predictions, task_type="regression")
        self.report_metrics(metrics, ["rmse", "mse", "mae"])

        sample_score = recommender.predict_one(SAMPLE_USER, SAMPLE_MOVIE)
        sample_title = catalog.get(SAMPLE_MOVIE).title if SAMPLE_MOVIE in catalog else str(SAMPLE_MOVIE)
        verdict = "Yes" if sample_score > RECOMMEND_THRESHOLD else "No"
        self.say(f"Predicted rating for user {SAMPLE_USER} and movie '{sample_title}': {sample_score:.2f}")
        self.say(f"Recommend: {verdict}")
        self.say()

        scored = sorted(
            ((recommender.predict_one(SAMPLE_USER, movie.id), movie) for movie in catalog),
            key=lambda pair: pair[0],
            reverse=True,
        )
        top_movies = [movie.title for _, movie in scored[:TOP_MOVIE_COUNT]]
        self.say(f"Top {TOP_MOVIE_COUNT} movie recommendations for user {SAMPLE_USER}:")
        for score, movie in scored[:TOP_MOVIE_COUNT]:
            self.say(f"  {movie.title} ({score:.2f})")

        return RecipeResult(
            recipe=self.name,
            metrics=metrics,
            details={"sample_score": sample_score, "top_movies": top_movies},
        )
