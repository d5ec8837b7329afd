"""Lesson text: the bundled default lesson and loading lessons from disk."""

from pathlib import Path
from typing import Sequence

from models import Sentence

DEFAULT_LESSON = """\
Daily Life and Growth in the Project
Last Wednesday, {on a work day|on a work day | 在工作日}, 22-year-old Xiao Chen pushed open the office door—by then, {he had been running a project|run a project | 运作一个项目} for three weeks, and {he had spent a lot of time|spend a lot of time | 花费很多时间} refining its details.
A few days prior, {he had gone to a film set|go to a film set | 去电影片场} with his team to collect scene references, a trip that taught him practical presentation skills.
That morning, he {was playing roles in different scenes|play roles in different scenes | 在不同场景中扮演角色} for the project’s demo, and {he had turned to the next page|turn to the next page | 翻到下一页} of his plan list three times to cross-check tasks.
The project required participants to have {high school education and above|high school education and above | 高中及以上学历}, plus {years of special training|years of special training | 多年的特殊训练}—though Xiao Chen lacked the latter, he believed he could perform {as good as|as good as | 和…… 一样好} seasoned professionals {in some way|in some way | 在某种程度上}.
But when he {encountered a similar problem|a similar problem | 一个相似的问题} that afternoon, he realized {he had done something wrong|do something wrong | 做错事} the day before, leaving him to {face many difficulties|face many difficulties | 面对很多困难} overnight.
{To be honest|to be honest | 老实说}, he almost {wanted to give up|give up | 放弃} as he stared at his screen, and {he had been feeling angry with|be angry with | 对…… 生气} himself for the oversight.
{After all|after all | 毕竟}, the project included a segment to {help kids deal with their fears|help kids deal with their fears | 帮助孩子们应对恐惧}, and Xiao Chen {was determined to keep Chinese traditions alive|keep Chinese traditions alive | 保持中国传统存活} through it—for example, a colleague would {wear funny costumes|wear funny costumes | 穿着滑稽的服装} to showcase folk customs, and he didn’t want to ruin that.
He {took a deep breath|deep breath | 深呼吸 (名词词组)} to steady himself; {he would write diaries to calm down|write diaries to calm down | 写日记来冷静} on stressful days, so he jotted down his thoughts quickly, reminding himself {he would carry on|carry on | 继续进行} and {he was chasing his dream|chase one's dream | 追逐梦想}.
First, {he made sure|make sure | 确保} that {a home-cooked meal had been prepared|home-cooked meals | 家常菜} for him (a friend had dropped it off), knowing {it's not easy to do|it's not easy to do | 做某事并不容易} tough work on an empty stomach.
Then he sat {in a set area|in a set area | 在规定区域内} by the window, {was sorting out|sort out | 整理；分类} messy documents, and recalled that {he had added a personal touch|personal touch | 个人特色} to the proposal’s opening the day before.
Later, the project {involved a segment of hard news|hard news | 硬新闻（严肃新闻）} editing. Xiao Chen {had lost the team’s trust|get back one's trust | 赢回某人的信任} due to his earlier mistake, so {he was trying to get back their trust|get back one's trust | 赢回某人的信任}—{in the team members’ eyes|in one's eyes | 在某人眼里}, {he had been dealing with problems|deal with problems | 处理问题} more carefully lately, and his tasks {took no longer than|not longer than | 不超过} the scheduled time.
Even though {he had hesitated about signing up for the mascot design competition|sign up for the mascot design competition | 报名参加吉祥物设计比赛} weeks ago, he now felt ready; {the proposal would be polished through careful preparation|through careful preparation | 通过仔细地准备}, and {it’s better not to rush through the process|had better (not) do sth | 最好 (不) 做某事}, he told himself.
"""


def load_lesson(path: Path | None) -> str:
    """Read lesson text from a UTF-8 file, or return the default lesson.

    Raises:
        OSError: If the file cannot be read.
    """
    if path is None:
        return DEFAULT_LESSON
    return path.read_text(encoding="utf-8")


def lesson_stats(sentences: Sequence[Sentence]) -> dict[str, int]:
    """Count sentences and drills in a parsed lesson."""
    return {
        "sentences": len(sentences),
        "practice_sentences": sum(1 for s in sentences if s.has_drills),
        "drills": sum(s.drill_count for s in sentences),
    }
