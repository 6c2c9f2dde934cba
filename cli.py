# cli.py
# Flask CLI commands: `flask init-db`, `flask seed-demo`, `flask calculate-rankings`, `flask recompute-aggregates`

import click
from flask.cli import with_appcontext

from errors import JudgingError
from extensions import db
from judging import aggregation, ranking, registry, scoring
from models import (
    AuditLog, Competition, Criterion, Judge, Role, Score, Submission, Team, TeamMember, User, XpEvent,
)


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Create all tables."""
    db.create_all()
    click.echo("Database tables created.")


@click.command('seed-demo')
@with_appcontext
def seed_demo_command():
    """Wipe judging data and load a small demo competition."""
    click.echo("Clearing existing data...")
    # Reverse dependency order
    for model in (XpEvent, AuditLog, Score, Judge, Submission, Criterion, Competition, TeamMember, Team, User):
        db.session.query(model).delete()
    db.session.commit()

    click.echo("Adding demo data...")
    try:
        organizer = User(name='Olga Organizer', handle='olga')
        organizer.grant(Role.ORGANIZER)
        judge_a = User(name='Jon Judge', handle='jon')
        judge_a.grant(Role.JUDGE)
        judge_b = User(name='Jade Judge', handle='jade')
        judge_b.grant(Role.JUDGE, Role.MENTOR)
        alice = User(name='Alice', handle='alice')
        alice.grant(Role.PARTICIPANT)
        bob = User(name='Bob', handle='bob')
        bob.grant(Role.PARTICIPANT)
        db.session.add_all([organizer, judge_a, judge_b, alice, bob])

        hackathon = Competition(name='Spring Hack 2026', status='judging')
        hackathon.criteria = [
            Criterion(name='Innovation', max_score=10, weight=0.6, order=1),
            Criterion(name='Execution', max_score=20, weight=0.4, order=2),
        ]
        team_red = Team(name='Red')
        team_red.members = [TeamMember(user=alice)]
        team_blue = Team(name='Blue')
        team_blue.members = [TeamMember(user=bob)]
        db.session.add_all([hackathon, team_red, team_blue])
        db.session.flush()

        red = Submission(competition_id=hackathon.id, team_id=team_red.id, title='Red Rover', status='finalized')
        blue = Submission(competition_id=hackathon.id, team_id=team_blue.id, title='Blue Sky', status='finalized')
        db.session.add_all([red, blue])
        db.session.commit()

        registry.assign_judge(hackathon.id, judge_a.id, actor_id=organizer.id)
        registry.assign_judge(hackathon.id, judge_b.id, actor_id=organizer.id)

        innovation, execution = hackathon.criteria
        scoring.submit_score(red.id, judge_a.id, innovation.id, 8)
        scoring.submit_score(red.id, judge_b.id, innovation.id, 6)
        scoring.submit_score(red.id, judge_a.id, execution.id, 15)
        scoring.submit_score(blue.id, judge_a.id, innovation.id, 9)
        scoring.submit_score(blue.id, judge_b.id, execution.id, 12)

        run = ranking.calculate_rankings(hackathon.id, actor_id=organizer.id)
        click.echo(f"Demo data loaded: competition #{hackathon.id}, {run.ranked_count} submissions ranked.")
    except (JudgingError, ValueError) as e:
        db.session.rollback()
        raise click.ClickException(f"Seeding failed: {e}")


@click.command('calculate-rankings')
@click.argument('competition_id', type=int)
@with_appcontext
def calculate_rankings_command(competition_id):
    """Rank all scored, finalized submissions of a competition."""
    try:
        run = ranking.calculate_rankings(competition_id)
    except JudgingError as e:
        raise click.ClickException(e.message)
    for entry in run.standings:
        click.echo(f"{entry.rank:>3}  submission #{entry.submission_id}  {entry.score_aggregate:.2f}")
    click.echo(f"{run.ranked_count} submissions ranked.")


@click.command('recompute-aggregates')
@click.argument('competition_id', type=int)
@with_appcontext
def recompute_aggregates_command(competition_id):
    """Recompute every submission aggregate of a competition from its scores."""
    if db.session.get(Competition, competition_id) is None:
        raise click.ClickException(f"Competition {competition_id} not found")
    submissions = Submission.query.filter_by(competition_id=competition_id).order_by(Submission.id).all()
    try:
        for submission in submissions:
            aggregation.recompute(submission.id)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    click.echo(f"Recomputed {len(submissions)} aggregates.")


def register_commands(app):
    app.cli.add_command(init_db_command)
    app.cli.add_command(seed_demo_command)
    app.cli.add_command(calculate_rankings_command)
    app.cli.add_command(recompute_aggregates_command)
